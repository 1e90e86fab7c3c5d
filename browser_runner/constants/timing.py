"""Timing-related constants (timeouts, delays, retry defaults)."""

from typing import Final


class Timeouts:
    """Timeout values - MILLISECONDS for Playwright."""

    NAVIGATION: Final[int] = 60_000
    SELECTOR_WAIT: Final[int] = 10_000
    PROBE: Final[int] = 2_000
    RESULTS_LOAD: Final[int] = 60_000
    MESSAGES_RESPONSE: Final[int] = 60_000
    DOWNLOAD: Final[int] = 120_000
    CLICK: Final[int] = 10_000


class Delays:
    """Human-scale pause ranges in SECONDS (min, max)."""

    PROFILE_SETTLE: Final[tuple[float, float]] = (6.0, 12.0)
    BEFORE_SUBMIT: Final[tuple[float, float]] = (0.8, 1.6)
    SHORT: Final[tuple[float, float]] = (0.3, 0.7)
    MEDIUM: Final[tuple[float, float]] = (1.0, 3.0)
    PAGE_SETTLE: Final[tuple[float, float]] = (2.5, 4.0)
    BETWEEN_SCROLLS: Final[tuple[float, float]] = (1.5, 5.2)
    AFTER_LOAD_MORE: Final[tuple[float, float]] = (2.1, 5.3)
    AFTER_SCROLL_CYCLE: Final[tuple[float, float]] = (2.5, 6.2)
    SCROLL_STEP: Final[tuple[float, float]] = (0.0, 0.2)
    POINTER_STEP: Final[tuple[float, float]] = (0.01, 0.05)
    AFTER_CLICK: Final[tuple[float, float]] = (0.05, 0.15)


class Retries:
    """Defaults for step-level retry with exponential backoff."""

    MAX_ATTEMPTS: Final[int] = 4
    BASE_DELAY: Final[float] = 3.0
