"""Anti-detection helpers."""

from .human_simulator import HumanSimulator
from .stealth_config import StealthConfig

__all__ = ["HumanSimulator", "StealthConfig"]
