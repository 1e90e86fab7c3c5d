"""Assigned proxy lookup."""

from typing import Any, List, Optional
from urllib.parse import quote, urlsplit

from browser_runner.repositories.base import BaseRepository


class Proxy:
    """Proxy pool entry."""

    def __init__(self, id: int, url: str, username: str, password: str, enabled: bool = True):
        """Initialize proxy entity."""
        self.id = id
        self.url = url
        self.username = username
        self.password = password
        self.enabled = enabled

    def to_uri(self) -> str:
        """
        Render the proxy as a URI with embedded credentials.

        ``url`` may be ``host:port`` or carry a scheme; a missing scheme
        defaults to http.
        """
        url = self.url if "://" in self.url else f"http://{self.url}"
        parts = urlsplit(url)
        if not self.username:
            return f"{parts.scheme}://{parts.netloc}"
        credentials = f"{quote(self.username, safe='')}:{quote(self.password or '', safe='')}"
        return f"{parts.scheme}://{credentials}@{parts.netloc}"

    def to_dict(self) -> dict:
        """Convert proxy to dictionary (password omitted)."""
        return {
            "id": self.id,
            "url": self.url,
            "username": self.username,
            "enabled": self.enabled,
        }


class ProxyRepository(BaseRepository[Proxy]):
    """Read-only access to the proxy pool and per-user assignments."""

    def _row_to_proxy(self, row: Any) -> Proxy:
        return Proxy(
            id=row["id"],
            url=row["url"],
            username=row["username"],
            password=row["password"],
            enabled=bool(row.get("enabled", True)),
        )

    async def get_by_id(self, id: int) -> Optional[Proxy]:
        """
        Get a proxy by ID.

        Args:
            id: Proxy ID

        Returns:
            Proxy or None if not found
        """
        async with self.db.get_connection() as conn:
            row = await conn.fetchrow(
                "SELECT id, url, username, password, enabled FROM proxy_pool WHERE id = $1", id
            )
            return self._row_to_proxy(row) if row else None

    async def get_all(self, limit: int = 100) -> List[Proxy]:
        """
        Get enabled proxies.

        Args:
            limit: Maximum number of proxies to return

        Returns:
            List of proxies
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                """
                SELECT id, url, username, password, enabled FROM proxy_pool
                WHERE enabled = TRUE
                ORDER BY id
                LIMIT $1
                """,
                limit,
            )
            return [self._row_to_proxy(row) for row in rows]

    async def get_assigned_proxy(self, user_id: str, tenant: str) -> Optional[str]:
        """
        Get the proxy URI assigned to a user.

        Args:
            user_id: Owning user
            tenant: Owning tenant

        Returns:
            Proxy URI or None if the user has no enabled assignment
        """
        async with self.db.get_connection() as conn:
            row = await conn.fetchrow(
                """
                SELECT p.id, p.url, p.username, p.password, p.enabled
                FROM assigned_proxies a
                JOIN proxy_pool p ON p.id = a.proxy_pool_id
                WHERE a.user_id = $1 AND a.tenant = $2 AND p.enabled = TRUE
                ORDER BY a.updated_at DESC
                LIMIT 1
                """,
                user_id,
                tenant,
            )
            return self._row_to_proxy(row).to_uri() if row else None
