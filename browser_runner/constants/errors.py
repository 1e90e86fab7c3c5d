"""Stable error references and failure signatures."""

from typing import Final

# Chromium's net error when the site bounces an expired login between redirects.
REDIRECT_LOOP_SIGNATURE: Final[str] = "ERR_TOO_MANY_REDIRECTS"

# Reference attached to classified errors that invalidate a captured session.
SESSION_INVALID_REFERENCE: Final[str] = "S001"

SESSION_INVALID_MESSAGE: Final[str] = "Too many redirects: session token might be invalid."
