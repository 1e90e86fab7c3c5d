"""Repository pattern implementation."""

from .base import BaseRepository
from .browser_config_repository import BrowserConfigRepository
from .error_repository import RunError, RunErrorRepository
from .proxy_repository import Proxy, ProxyRepository
from .result_repository import RunResult, RunResultRepository
from .run_repository import RunRepository

__all__ = [
    "BaseRepository",
    "BrowserConfigRepository",
    "RunError",
    "RunErrorRepository",
    "Proxy",
    "ProxyRepository",
    "RunResult",
    "RunResultRepository",
    "RunRepository",
]
