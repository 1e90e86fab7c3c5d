"""Runtime configuration."""

from .settings import RunnerSettings, get_settings, reset_settings

__all__ = ["RunnerSettings", "get_settings", "reset_settings"]
