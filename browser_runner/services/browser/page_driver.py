"""Page-level navigation and interaction port.

Actions talk to the browser only through ``PageDriver`` so they can run
against a scripted fake in tests. ``PlaywrightPageDriver`` is the production
adapter. Every blocking call takes an explicit timeout in milliseconds, and
selectors can be scoped to an iframe by passing the iframe's selector as
``frame``.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from loguru import logger
from playwright.async_api import FrameLocator, Locator, Page

from browser_runner.constants import Timeouts

UrlMatcher = Callable[[str], bool]
Trigger = Callable[[], Awaitable[None]]


class PageDriver(ABC):
    """Browser primitives consumed by page actions."""

    @abstractmethod
    async def goto(self, url: str, timeout: int = Timeouts.NAVIGATION) -> None:
        """Navigate to ``url``."""

    @abstractmethod
    async def reload(self, timeout: int = Timeouts.NAVIGATION) -> None:
        """Reload the current page."""

    @abstractmethod
    async def count(self, selector: str, frame: Optional[str] = None) -> int:
        """Number of elements currently matching ``selector``."""

    @abstractmethod
    async def wait_for(
        self,
        selector: str,
        state: str = "visible",
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> None:
        """Wait until the ``nth`` match reaches ``state``."""

    @abstractmethod
    async def text(
        self,
        selector: str,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> str:
        """Rendered text of the ``nth`` match."""

    @abstractmethod
    async def click(
        self,
        selector: str,
        timeout: int = Timeouts.CLICK,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> None:
        """Click the ``nth`` match."""

    @abstractmethod
    async def type(
        self,
        selector: str,
        text: str,
        delay: float = 0,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> None:
        """Type ``text`` key by key, waiting ``delay`` ms between keys."""

    @abstractmethod
    async def is_visible(self, selector: str, nth: int = 0, frame: Optional[str] = None) -> bool:
        """Whether the ``nth`` match is visible right now (no waiting)."""

    @abstractmethod
    async def is_enabled(
        self,
        selector: str,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> bool:
        """Whether the ``nth`` match is enabled."""

    @abstractmethod
    async def attribute_values(
        self, selector: str, name: str, frame: Optional[str] = None
    ) -> List[str]:
        """Values of attribute ``name`` on every match, skipping missing ones."""

    @abstractmethod
    async def scroll_into_view(
        self,
        selector: str,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> None:
        """Scroll the ``nth`` match into view if needed."""

    @abstractmethod
    async def bounding_box(
        self,
        selector: str,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> Optional[Dict[str, float]]:
        """Bounding box (x, y, width, height) of the ``nth`` match."""

    @abstractmethod
    async def mouse_move(self, x: float, y: float) -> None:
        """Move the pointer to viewport coordinates."""

    @abstractmethod
    async def scroll_by(self, delta_y: float) -> None:
        """Scroll the window vertically by ``delta_y`` pixels."""

    @abstractmethod
    async def viewport_height(self) -> int:
        """Window inner height in pixels."""

    @abstractmethod
    async def scroll_height(self) -> int:
        """Document body scroll height in pixels."""

    @abstractmethod
    async def expect_json_response(
        self,
        matcher: UrlMatcher,
        trigger: Trigger,
        timeout: int = Timeouts.MESSAGES_RESPONSE,
    ) -> Any:
        """
        Run ``trigger`` and return the JSON body of the first successful
        response whose URL satisfies ``matcher``.
        """

    @abstractmethod
    async def expect_download(self, trigger: Trigger, timeout: int = Timeouts.DOWNLOAD) -> bytes:
        """Run ``trigger`` and return the bytes of the download it starts."""

    @abstractmethod
    async def close(self) -> None:
        """Close the page."""


class PlaywrightPageDriver(PageDriver):
    """PageDriver backed by a Playwright page."""

    def __init__(self, page: Page):
        """
        Initialize driver.

        Args:
            page: Playwright page owned by the enclosing browser session
        """
        self.page = page

    def _root(self, frame: Optional[str]) -> Union[Page, FrameLocator]:
        return self.page.frame_locator(frame) if frame else self.page

    def _locate(self, selector: str, nth: int = 0, frame: Optional[str] = None) -> Locator:
        return self._root(frame).locator(selector).nth(nth)

    async def goto(self, url: str, timeout: int = Timeouts.NAVIGATION) -> None:
        logger.debug(f"Navigating to {url}")
        await self.page.goto(url, timeout=timeout, wait_until="domcontentloaded")

    async def reload(self, timeout: int = Timeouts.NAVIGATION) -> None:
        await self.page.reload(timeout=timeout, wait_until="domcontentloaded")

    async def count(self, selector: str, frame: Optional[str] = None) -> int:
        return await self._root(frame).locator(selector).count()

    async def wait_for(
        self,
        selector: str,
        state: str = "visible",
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> None:
        await self._locate(selector, nth, frame).wait_for(state=state, timeout=timeout)  # type: ignore[arg-type]

    async def text(
        self,
        selector: str,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> str:
        return (await self._locate(selector, nth, frame).inner_text(timeout=timeout)).strip()

    async def click(
        self,
        selector: str,
        timeout: int = Timeouts.CLICK,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> None:
        await self._locate(selector, nth, frame).click(timeout=timeout)

    async def type(
        self,
        selector: str,
        text: str,
        delay: float = 0,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> None:
        await self._locate(selector, nth, frame).press_sequentially(
            text, delay=delay, timeout=timeout
        )

    async def is_visible(self, selector: str, nth: int = 0, frame: Optional[str] = None) -> bool:
        return await self._locate(selector, nth, frame).is_visible()

    async def is_enabled(
        self,
        selector: str,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> bool:
        return await self._locate(selector, nth, frame).is_enabled(timeout=timeout)

    async def attribute_values(
        self, selector: str, name: str, frame: Optional[str] = None
    ) -> List[str]:
        values = await self._root(frame).locator(selector).evaluate_all(
            "(elements, name) => elements.map((el) => el.getAttribute(name))", name
        )
        return [value for value in values if value]

    async def scroll_into_view(
        self,
        selector: str,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> None:
        await self._locate(selector, nth, frame).scroll_into_view_if_needed(timeout=timeout)

    async def bounding_box(
        self,
        selector: str,
        timeout: int = Timeouts.SELECTOR_WAIT,
        nth: int = 0,
        frame: Optional[str] = None,
    ) -> Optional[Dict[str, float]]:
        box = await self._locate(selector, nth, frame).bounding_box(timeout=timeout)
        return dict(box) if box else None

    async def mouse_move(self, x: float, y: float) -> None:
        await self.page.mouse.move(x, y)

    async def scroll_by(self, delta_y: float) -> None:
        await self.page.evaluate("(dy) => window.scrollBy(0, dy)", delta_y)

    async def viewport_height(self) -> int:
        return int(await self.page.evaluate("() => window.innerHeight"))

    async def scroll_height(self) -> int:
        return int(await self.page.evaluate("() => document.body.scrollHeight"))

    async def expect_json_response(
        self,
        matcher: UrlMatcher,
        trigger: Trigger,
        timeout: int = Timeouts.MESSAGES_RESPONSE,
    ) -> Any:
        async with self.page.expect_response(
            lambda response: response.status == 200 and matcher(response.url),
            timeout=timeout,
        ) as response_info:
            await trigger()
        response = await response_info.value
        logger.debug(f"Captured response {response.url}")
        return await response.json()

    async def expect_download(self, trigger: Trigger, timeout: int = Timeouts.DOWNLOAD) -> bytes:
        async with self.page.expect_download(timeout=timeout) as download_info:
            await trigger()
        download = await download_info.value
        path = await download.path()
        logger.debug(f"Download finished: {download.suggested_filename}")
        return Path(path).read_bytes()

    async def close(self) -> None:
        if not self.page.is_closed():
            await self.page.close()
