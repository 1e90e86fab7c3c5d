"""Constants for the run engine.

    from browser_runner.constants import Timeouts, Delays, LinkedinSelectors
"""

from .errors import (
    REDIRECT_LOOP_SIGNATURE,
    SESSION_INVALID_MESSAGE,
    SESSION_INVALID_REFERENCE,
)
from .selectors import LinkedinSelectors, LinkedinUrls
from .timing import Delays, Retries, Timeouts

__all__ = [
    "REDIRECT_LOOP_SIGNATURE",
    "SESSION_INVALID_MESSAGE",
    "SESSION_INVALID_REFERENCE",
    "LinkedinSelectors",
    "LinkedinUrls",
    "Delays",
    "Retries",
    "Timeouts",
]
