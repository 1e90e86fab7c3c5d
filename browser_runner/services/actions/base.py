"""Base class shared by every page action."""

import random
import re
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, ClassVar, Dict, Optional, Type, TypeVar

from browser_runner.constants import LinkedinUrls
from browser_runner.core.config.settings import RunnerSettings, get_settings
from browser_runner.core.enums import RunType
from browser_runner.core.exceptions import InteractionError
from browser_runner.core.retry import with_retry
from browser_runner.models.payloads import RunPayload
from browser_runner.services.browser.page_driver import PageDriver
from browser_runner.services.browser.session import BrowserSessionFactory, SessionSpec
from browser_runner.utils.anti_detection.human_simulator import HumanSimulator

T = TypeVar("T")


def parse_count(text: str) -> int:
    """
    Read a result count such as "1,204 connections" as an integer.

    Raises:
        InteractionError: If the text contains no digits
    """
    digits = re.sub(r"\D", "", text or "")
    if not digits:
        raise InteractionError("Could not read result count", details={"text": text})
    return int(digits)


def absolute_profile_url(href: str) -> str:
    """Strip the query string and make a site-relative link absolute."""
    url = href.split("?")[0]
    if url.startswith("/"):
        url = f"{LinkedinUrls.BASE}{url}"
    return url


class BaseAction(ABC):
    """
    One page operation per run type.

    ``execute`` opens a single-use browser session for the call and releases
    it on every exit path; subclasses implement ``perform`` against the
    session's driver.
    """

    run_type: ClassVar[RunType]
    payload_model: ClassVar[Type[RunPayload]]

    def __init__(
        self,
        session_factory: BrowserSessionFactory,
        settings: Optional[RunnerSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize action.

        Args:
            session_factory: Factory for scoped browser sessions
            settings: Runner settings (defaults to the process-wide settings)
            rng: Random source for human timing, injectable for tests
        """
        self.session_factory = session_factory
        self.settings = settings or get_settings()
        self.rng = rng

    async def execute(self, spec: SessionSpec, payload: RunPayload) -> Dict[str, Any]:
        """
        Run the action in a fresh browser session.

        Args:
            spec: Session cookies, user agent and proxy
            payload: Validated payload for this action's run type

        Returns:
            JSON-serializable result payload
        """
        async with self.session_factory.open(spec) as driver:
            human = HumanSimulator(driver, self.settings.human_behavior(), rng=self.rng)
            return await self.perform(driver, human, payload)

    @abstractmethod
    async def perform(
        self, driver: PageDriver, human: HumanSimulator, payload: Any
    ) -> Dict[str, Any]:
        """
        Drive the page.

        Args:
            driver: Page driver for the session
            human: Human timing helper bound to ``driver``
            payload: Validated payload

        Returns:
            JSON-serializable result payload
        """

    async def retry_step(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Retry a single flaky interaction step with the configured backoff."""
        return await with_retry(
            operation,
            max_attempts=self.settings.step_retry_attempts,
            base_delay=self.settings.step_retry_base_delay,
        )
