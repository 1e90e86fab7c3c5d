"""Browser session and page driver."""

from .page_driver import PageDriver, PlaywrightPageDriver
from .session import BrowserSessionFactory, SessionSpec, parse_proxy

__all__ = [
    "PageDriver",
    "PlaywrightPageDriver",
    "BrowserSessionFactory",
    "SessionSpec",
    "parse_proxy",
]
