"""Detect two executions driving the same browser session at once."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Set

from loguru import logger

from browser_runner.core.exceptions import ConcurrentExecutionError


class ExecutionGuard:
    """
    Single-writer check for browser configs.

    This does not serialize runs; that is the scheduler's job (see
    ``RunDispatcher``). It turns a violated contract into a loud, persisted
    failure instead of two runs silently corrupting one login session.
    """

    def __init__(self, enabled: bool = True):
        """
        Initialize guard.

        Args:
            enabled: When False, overlapping holds are allowed
        """
        self.enabled = enabled
        self._active: Set[int] = set()

    def is_active(self, browser_config_id: int) -> bool:
        """Whether a run currently holds ``browser_config_id``."""
        return browser_config_id in self._active

    @asynccontextmanager
    async def hold(self, browser_config_id: int) -> AsyncIterator[None]:
        """
        Mark a browser config as in use for the duration of the block.

        Args:
            browser_config_id: Browser config the run drives

        Raises:
            ConcurrentExecutionError: If the config is already held and the
                check is enabled
        """
        if self.enabled and browser_config_id in self._active:
            logger.error(f"Concurrent execution detected on browser config {browser_config_id}")
            raise ConcurrentExecutionError(browser_config_id)

        owner = browser_config_id not in self._active
        self._active.add(browser_config_id)
        try:
            yield
        finally:
            if owner:
                self._active.discard(browser_config_id)
