"""Data models."""

from .browser_config import BrowserConfig, parse_cookies
from .database import Database
from .payloads import PAYLOAD_MODELS, parse_payload
from .run import ALLOWED_TRANSITIONS, TERMINAL_STATUSES, RunRecord

__all__ = [
    "BrowserConfig",
    "parse_cookies",
    "Database",
    "PAYLOAD_MODELS",
    "parse_payload",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "RunRecord",
]
