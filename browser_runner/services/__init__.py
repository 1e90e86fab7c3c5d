"""Run engine services."""

import importlib as _importlib
from typing import Any

_LAZY_MODULE_MAP = {
    "AutomationRunner": ("browser_runner.services.automation_runner", "AutomationRunner"),
    "ExecutionGuard": ("browser_runner.services.execution_guard", "ExecutionGuard"),
    "RunDispatcher": ("browser_runner.services.run_dispatcher", "RunDispatcher"),
    "SessionHealthTracker": ("browser_runner.services.session_health", "SessionHealthTracker"),
}

__all__ = list(_LAZY_MODULE_MAP.keys())


def __getattr__(name: str) -> Any:
    """Lazy import so browser helpers can be imported without the runner."""
    if name in _LAZY_MODULE_MAP:
        module_path, attr_name = _LAZY_MODULE_MAP[name]
        attr = getattr(_importlib.import_module(module_path), attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
