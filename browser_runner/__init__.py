"""Browser automation run engine - executes scheduled browser-driven runs."""

import importlib as _importlib
from typing import TYPE_CHECKING, Any

__version__ = "1.0.0"
__license__ = "MIT"

if TYPE_CHECKING:
    from .core.error_classifier import classify as classify
    from .core.logger import setup_structured_logging as setup_structured_logging
    from .core.retry import with_retry as with_retry
    from .models.database import Database as Database
    from .services.automation_runner import AutomationRunner as AutomationRunner
    from .services.run_dispatcher import RunDispatcher as RunDispatcher

# Explicit lazy-loading map: name -> (module_path, attribute_name)
_LAZY_MODULE_MAP = {
    "classify": ("browser_runner.core.error_classifier", "classify"),
    "setup_structured_logging": ("browser_runner.core.logger", "setup_structured_logging"),
    "with_retry": ("browser_runner.core.retry", "with_retry"),
    "Database": ("browser_runner.models.database", "Database"),
    "AutomationRunner": ("browser_runner.services.automation_runner", "AutomationRunner"),
    "RunDispatcher": ("browser_runner.services.run_dispatcher", "RunDispatcher"),
}

__all__ = list(_LAZY_MODULE_MAP.keys())


def __getattr__(name: str) -> Any:
    """Lazy import with explicit mapping - importlib based."""
    if name in _LAZY_MODULE_MAP:
        module_path, attr_name = _LAZY_MODULE_MAP[name]
        module = _importlib.import_module(module_path)
        attr = getattr(module, attr_name)
        # Cache in module globals to avoid repeated imports
        globals()[name] = attr
        return attr
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
