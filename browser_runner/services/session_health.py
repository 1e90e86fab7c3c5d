"""Propagate session-killing failures into the shared browser config state."""

from typing import TYPE_CHECKING

from loguru import logger

from browser_runner.core.enums import SessionStatus
from browser_runner.core.error_classifier import ClassifiedError

if TYPE_CHECKING:
    from browser_runner.repositories.browser_config_repository import BrowserConfigRepository


class SessionHealthTracker:
    """
    Marks a user's browser config INVALID after a session-invalidating failure.

    This is the only link between one run's outcome and every later run for
    the same user: once INVALID, the dispatcher skips the user's runs until
    a re-authentication flow stores a fresh session.
    """

    def __init__(self, config_repository: "BrowserConfigRepository"):
        """
        Initialize tracker.

        Args:
            config_repository: Browser config repository
        """
        self.config_repository = config_repository

    async def on_critical_error(self, user_id: str, tenant: str, error: ClassifiedError) -> bool:
        """
        Invalidate the owner's session if ``error`` says it is dead.

        Args:
            user_id: Session owner
            tenant: Owner's tenant
            error: Classified failure

        Returns:
            True if the browser config was marked INVALID
        """
        if not error.invalidates_session:
            return False

        updated = await self.config_repository.update_by_user_id(
            user_id, tenant, SessionStatus.INVALID
        )
        if updated:
            logger.warning(
                f"Browser session of user {user_id} ({tenant}) marked INVALID: {error.message}"
            )
        else:
            logger.warning(f"No browser config found to invalidate for user {user_id} ({tenant})")
        return updated
