"""Browser config repository."""

from typing import Any, Dict, List, Optional

from loguru import logger

from browser_runner.core.enums import SessionStatus
from browser_runner.models.browser_config import BrowserConfig
from browser_runner.models.database import Database
from browser_runner.repositories.base import BaseRepository


class BrowserConfigRepository(BaseRepository[BrowserConfig]):
    """Repository for ``browser_configs``."""

    async def get_by_id(self, id: int) -> Optional[BrowserConfig]:
        """
        Get browser config by ID.

        Args:
            id: Browser config ID

        Returns:
            BrowserConfig or None if not found
        """
        async with self.db.get_connection() as conn:
            row = await conn.fetchrow("SELECT * FROM browser_configs WHERE id = $1", id)
            return BrowserConfig.from_row(row) if row else None

    async def get_all(self, limit: int = 100) -> List[BrowserConfig]:
        """
        Get browser configs.

        Args:
            limit: Maximum number of configs to return

        Returns:
            List of browser configs
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch("SELECT * FROM browser_configs ORDER BY id LIMIT $1", limit)
            return [BrowserConfig.from_row(row) for row in rows]

    async def get_by_user_id(self, user_id: str, tenant: str) -> Optional[BrowserConfig]:
        """
        Get a user's browser config.

        Args:
            user_id: Owning user
            tenant: Owning tenant

        Returns:
            BrowserConfig or None if the user has none
        """
        async with self.db.get_connection() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM browser_configs WHERE user_id = $1 AND tenant = $2",
                user_id,
                tenant,
            )
            return BrowserConfig.from_row(row) if row else None

    async def upsert(
        self,
        user_id: str,
        tenant: str,
        cookies: str,
        user_agent: Optional[str],
    ) -> int:
        """
        Store a freshly captured session, restoring it to VALID.

        Args:
            user_id: Owning user
            tenant: Owning tenant
            cookies: Serialized cookie jar
            user_agent: User agent the session was captured with

        Returns:
            Browser config ID
        """
        async with self.db.get_connection() as conn:
            config_id = await conn.fetchval(
                """
                INSERT INTO browser_configs (user_id, tenant, cookies, user_agent, session_status)
                VALUES ($1, $2, $3, $4, $5)
                ON CONFLICT (user_id) DO UPDATE
                SET tenant = EXCLUDED.tenant,
                    cookies = EXCLUDED.cookies,
                    user_agent = EXCLUDED.user_agent,
                    session_status = EXCLUDED.session_status,
                    updated_at = NOW()
                RETURNING id
                """,
                user_id,
                tenant,
                cookies,
                user_agent,
                SessionStatus.VALID.value,
            )
            logger.info(f"Browser config stored for user {user_id} ({tenant})")
            return config_id

    async def update_by_user_id(
        self,
        user_id: str,
        tenant: str,
        session_status: SessionStatus,
    ) -> bool:
        """
        Update the session status of a user's browser config.

        Args:
            user_id: Owning user
            tenant: Owning tenant
            session_status: New session status

        Returns:
            True if a row was updated
        """
        async with self.db.get_connection() as conn:
            result = await conn.execute(
                """
                UPDATE browser_configs
                SET session_status = $1, updated_at = NOW()
                WHERE user_id = $2 AND tenant = $3
                """,
                SessionStatus(session_status).value,
                user_id,
                tenant,
            )
            return Database.parse_command_tag(result) > 0

    def _status_counts(self, rows: List[Any]) -> Dict[str, int]:
        counts = {status: 0 for status in SessionStatus.values()}
        for row in rows:
            counts[row["session_status"]] = row["count"]
        return counts

    async def get_status_counts(self) -> Dict[str, int]:
        """
        Count browser configs per session status.

        Returns:
            Mapping of session status to count
        """
        async with self.db.get_connection() as conn:
            rows = await conn.fetch(
                "SELECT session_status, COUNT(*) AS count FROM browser_configs GROUP BY session_status"
            )
            return self._status_counts(rows)
