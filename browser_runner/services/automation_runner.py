"""Execute one run end to end and persist exactly one outcome."""

import asyncio
from typing import TYPE_CHECKING, Mapping, Optional

from loguru import logger

from browser_runner.core.config.settings import RunnerSettings, get_settings
from browser_runner.core.enums import RunType
from browser_runner.core.error_classifier import ClassifiedError, classify
from browser_runner.core.exceptions import (
    BrowserConfigNotFoundError,
    ConfigurationError,
    RunEngineError,
    SessionUnavailableError,
    UnknownRunTypeError,
)
from browser_runner.core.logger import run_id_ctx
from browser_runner.models.payloads import parse_payload
from browser_runner.models.run import RunRecord
from browser_runner.services.actions.base import BaseAction
from browser_runner.services.browser.session import SessionSpec
from browser_runner.services.execution_guard import ExecutionGuard
from browser_runner.services.session_health import SessionHealthTracker

if TYPE_CHECKING:
    from browser_runner.repositories import (
        BrowserConfigRepository,
        ProxyRepository,
        RunErrorRepository,
        RunRepository,
        RunResultRepository,
    )


class AutomationRunner:
    """
    Runs a scheduled browser automation and records its outcome.

    ``run_automation`` never raises for a failed run: every failure is
    classified, logged once here, and persisted as the run's single error
    row, so a dispatch loop is never interrupted by one run.
    """

    def __init__(
        self,
        runs: "RunRepository",
        results: "RunResultRepository",
        errors: "RunErrorRepository",
        configs: "BrowserConfigRepository",
        proxies: "ProxyRepository",
        actions: Mapping[RunType, BaseAction],
        health: Optional[SessionHealthTracker] = None,
        guard: Optional[ExecutionGuard] = None,
        settings: Optional[RunnerSettings] = None,
    ):
        """
        Initialize runner.

        Args:
            runs: Run repository
            results: Run result repository
            errors: Run error repository
            configs: Browser config repository
            proxies: Proxy repository
            actions: Action per run type
            health: Session health tracker (built from ``configs`` if omitted)
            guard: Single-writer guard (built from settings if omitted)
            settings: Runner settings
        """
        self.settings = settings or get_settings()
        self.runs = runs
        self.results = results
        self.errors = errors
        self.configs = configs
        self.proxies = proxies
        self.actions = actions
        self.health = health or SessionHealthTracker(configs)
        self.guard = guard or ExecutionGuard(enabled=self.settings.single_writer_check)

    async def run_automation(self, run: RunRecord) -> None:
        """
        Execute a SCHEDULED run.

        Args:
            run: Run to execute; mutated in place as it moves through its states
        """
        token = run_id_ctx.set(run.id)
        try:
            try:
                async with self.guard.hold(run.browser_config_id):
                    await self._execute(run)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                await self._handle_failure(run, e)
        finally:
            run_id_ctx.reset(token)

    async def _execute(self, run: RunRecord) -> None:
        spec = await self._resolve_session(run)

        run.start()
        await self.runs.update_by_id(run)
        logger.info(f"Run {run.id} started ({run.type})")

        run_type = self._resolve_type(run.type)
        payload = parse_payload(run_type, run.payload)
        result = await self.actions[run_type].execute(spec, payload)

        # Result first: a failed write must leave the run FAILED, not COMPLETED
        await self.results.insert(run.id, run_type.value, result)
        run.complete()
        try:
            await self.runs.update_by_id(run)
        except Exception:
            logger.exception(f"Run {run.id} completed but its status could not be saved")
            return
        logger.info(f"Run {run.id} completed in {run.run_duration}s")

    async def _resolve_session(self, run: RunRecord) -> SessionSpec:
        config = await self.configs.get_by_id(run.browser_config_id)
        if config is None:
            raise BrowserConfigNotFoundError(run.browser_config_id)
        if not config.is_usable:
            raise SessionUnavailableError(config.id, config.session_status.value)

        proxy = await self.proxies.get_assigned_proxy(config.user_id, config.tenant)
        if proxy is None and self.settings.proxy_required:
            raise ConfigurationError(
                "No proxy assigned to user",
                details={"user_id": config.user_id, "tenant": config.tenant},
            )

        return SessionSpec(cookies=config.cookie_list(), user_agent=config.user_agent, proxy=proxy)

    def _resolve_type(self, value: str) -> RunType:
        try:
            run_type = RunType(value)
        except ValueError:
            raise UnknownRunTypeError(value)
        if run_type not in self.actions:
            raise UnknownRunTypeError(value)
        return run_type

    async def _handle_failure(self, run: RunRecord, exc: BaseException) -> None:
        classified = classify(exc)
        self._log_failure(run, classified, exc)

        if run.is_terminal:
            # Outcome already recorded; a second artifact would break the one-row rule
            return

        run.fail()
        # Error row first: a lost FAILED status write must not lose the audit trail
        try:
            await self.errors.insert(
                run.id,
                classified.message,
                classified.details,
                classified.reference,
                classified.code.value,
            )
        except Exception:
            logger.exception(f"Could not record error of run {run.id}")
        try:
            await self.runs.update_by_id(run)
        except Exception:
            logger.exception(f"Could not save FAILED status of run {run.id}")

        if classified.invalidates_session:
            try:
                await self.health.on_critical_error(run.user_id, run.tenant, classified)
            except Exception:
                logger.exception(f"Could not invalidate browser session for run {run.id}")

    def _log_failure(self, run: RunRecord, classified: ClassifiedError, exc: BaseException) -> None:
        message = (
            f"Run {run.id} ({run.type}) failed "
            f"[{classified.code.value}/{classified.severity.value}"
            f"{'/' + classified.reference if classified.reference else ''}]: {classified.message}"
        )
        if run.is_terminal:
            logger.opt(exception=exc).error(f"{message} (after reaching {run.status.value})")
        elif isinstance(exc, RunEngineError):
            logger.error(message)
        else:
            logger.opt(exception=exc).error(message)
