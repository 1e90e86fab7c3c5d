"""Scheduler-side dispatch loop enforcing one active run per browser config."""

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Dict, Optional

from loguru import logger

from browser_runner.core.config.settings import RunnerSettings, get_settings
from browser_runner.models.run import RunRecord
from browser_runner.services.automation_runner import AutomationRunner

if TYPE_CHECKING:
    from browser_runner.repositories import BrowserConfigRepository, RunRepository


class RunDispatcher:
    """
    Dispatch SCHEDULED runs to the runner.

    Runs against the same browser config are serialized with a per-config
    lock, and at most ``dispatch_concurrency`` runs execute at once. A run
    whose session is not VALID when its turn comes is left SCHEDULED.
    """

    def __init__(
        self,
        runner: AutomationRunner,
        runs: "RunRepository",
        configs: "BrowserConfigRepository",
        settings: Optional[RunnerSettings] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            runner: Automation runner
            runs: Run repository
            configs: Browser config repository
            settings: Runner settings
        """
        self.settings = settings or get_settings()
        self.runner = runner
        self.runs = runs
        self.configs = configs
        self._locks: Dict[int, asyncio.Lock] = {}
        self._lock_users: Dict[int, int] = {}
        self._semaphore = asyncio.Semaphore(self.settings.dispatch_concurrency)

    @property
    def tracked_configs(self) -> int:
        """Number of browser configs with a live execution lock."""
        return len(self._locks)

    @asynccontextmanager
    async def config_lock(self, browser_config_id: int) -> AsyncIterator[None]:
        """
        Hold the execution lock of a browser config.

        The lock is dropped once its last holder or waiter leaves, so only
        configs with runs in flight keep one.

        Args:
            browser_config_id: Browser config ID
        """
        lock = self._locks.setdefault(browser_config_id, asyncio.Lock())
        self._lock_users[browser_config_id] = self._lock_users.get(browser_config_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[browser_config_id] -= 1
            if self._lock_users[browser_config_id] == 0:
                del self._lock_users[browser_config_id]
                del self._locks[browser_config_id]

    async def dispatch(self, run: RunRecord) -> bool:
        """
        Execute one run once its browser config is free.

        Args:
            run: SCHEDULED run

        Returns:
            True if the run was executed, False if it was skipped
        """
        async with self.config_lock(run.browser_config_id):
            config = await self.configs.get_by_id(run.browser_config_id)
            if config is not None and not config.is_usable:
                logger.info(
                    f"Skipping run {run.id}: browser session is {config.session_status.value}"
                )
                return False
            async with self._semaphore:
                await self.runner.run_automation(run)
            return True

    async def run_pending(self, limit: Optional[int] = None) -> int:
        """
        Load due runs and dispatch them concurrently.

        Args:
            limit: Maximum number of runs to load (defaults to the batch size)

        Returns:
            Number of runs executed
        """
        pending = await self.runs.get_scheduled(limit or self.settings.dispatch_batch_size)
        if not pending:
            logger.debug("No scheduled runs")
            return 0

        logger.info(f"Dispatching {len(pending)} scheduled runs")
        outcomes = await asyncio.gather(*(self.dispatch(run) for run in pending))
        return sum(1 for executed in outcomes if executed)

    async def run_forever(self, stop_event: asyncio.Event, limit: Optional[int] = None) -> None:
        """
        Dispatch batches every ``dispatch_interval`` seconds until stopped.

        Args:
            stop_event: Set to stop after the current batch
            limit: Maximum number of runs per batch
        """
        interval = self.settings.dispatch_interval
        logger.info(f"Dispatcher started (interval={interval}s)")
        while not stop_event.is_set():
            try:
                await self.run_pending(limit)
            except Exception:
                logger.exception("Dispatch cycle failed")

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Dispatcher stopped")
