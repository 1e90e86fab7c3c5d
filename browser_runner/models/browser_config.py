"""Captured browser session (cookie jar + user agent) and its health."""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from browser_runner.core.enums import SessionStatus
from browser_runner.core.exceptions import CookieFormatError

_SAME_SITE = {"strict": "Strict", "lax": "Lax", "none": "None", "no_restriction": "None"}
_COOKIE_KEYS = ("name", "value", "url", "domain", "path", "expires", "httpOnly", "secure", "sameSite")


def parse_cookies(raw: Optional[str]) -> List[Dict[str, Any]]:
    """
    Parse a serialized cookie jar into Playwright's ``add_cookies`` format.

    Accepts a JSON list of cookies or an object with a ``cookies`` list
    (browser-extension export shape). Unknown keys are dropped and
    ``sameSite`` values are normalised.

    Args:
        raw: Serialized cookie jar

    Returns:
        List of cookie dictionaries

    Raises:
        CookieFormatError: If the jar is missing or malformed
    """
    if not raw:
        raise CookieFormatError("Browser config has no stored cookies")
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CookieFormatError(f"Stored cookies are not valid JSON: {e}")

    if isinstance(data, dict):
        data = data.get("cookies")
    if not isinstance(data, list):
        raise CookieFormatError()

    cookies: List[Dict[str, Any]] = []
    for item in data:
        if not isinstance(item, dict) or not item.get("name") or "value" not in item:
            raise CookieFormatError("Every cookie needs a name and a value")
        cookie = {key: item[key] for key in _COOKIE_KEYS if item.get(key) is not None}
        if "expirationDate" in item and "expires" not in cookie:
            cookie["expires"] = item["expirationDate"]
        if "sameSite" in cookie:
            same_site = _SAME_SITE.get(str(cookie["sameSite"]).lower())
            if same_site:
                cookie["sameSite"] = same_site
            else:
                del cookie["sameSite"]
        if "url" not in cookie:
            if "domain" not in cookie:
                raise CookieFormatError(f"Cookie '{cookie['name']}' has neither url nor domain")
            cookie.setdefault("path", "/")
        cookies.append(cookie)
    return cookies


@dataclass
class BrowserConfig:
    """Per-user captured session."""

    id: int
    user_id: str
    tenant: str
    cookies: Optional[str]
    user_agent: Optional[str]
    session_status: SessionStatus = SessionStatus.VALID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_usable(self) -> bool:
        """Whether runs may be dispatched against this session."""
        return self.session_status is SessionStatus.VALID

    def cookie_list(self) -> List[Dict[str, Any]]:
        """Stored cookies in Playwright format."""
        return parse_cookies(self.cookies)

    def to_dict(self) -> Dict[str, Any]:
        """Convert browser config to dictionary (cookies omitted)."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "tenant": self.tenant,
            "user_agent": self.user_agent,
            "session_status": self.session_status.value,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "BrowserConfig":
        """Build a browser config from a ``browser_configs`` row."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            tenant=row["tenant"],
            cookies=row.get("cookies"),
            user_agent=row.get("user_agent"),
            session_status=SessionStatus(row.get("session_status") or SessionStatus.VALID.value),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )
