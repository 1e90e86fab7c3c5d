"""Discover the session owner's first-degree connections."""

from typing import Any, Dict, List, Optional

from loguru import logger

from browser_runner.constants import Delays, LinkedinSelectors as S, LinkedinUrls, Timeouts
from browser_runner.core.enums import RunType
from browser_runner.core.error_classifier import classify
from browser_runner.models.payloads import FindConnectionsPayload
from browser_runner.services.actions.base import BaseAction, absolute_profile_url, parse_count
from browser_runner.services.browser.page_driver import PageDriver
from browser_runner.utils.anti_detection.human_simulator import HumanSimulator


class FindConnectionsAction(BaseAction):
    """
    Scroll the connections list and collect profile URLs.

    The list grows through infinite scroll plus a "Show more results"
    button. Browsing between batches is randomized (scroll bursts in both
    directions, occasional pointer wandering) because a metronomic scroll
    pattern is what gets sessions flagged.

    A failure part way through keeps what was collected: the result carries
    the partial list and the classified error. Failures that invalidate the
    session are raised instead so the run fails and the session is marked.
    """

    run_type = RunType.FIND_CONNECTIONS
    payload_model = FindConnectionsPayload

    async def perform(
        self,
        driver: PageDriver,
        human: HumanSimulator,
        payload: FindConnectionsPayload,
    ) -> Dict[str, Any]:
        limit = payload.max_results or self.settings.max_connections
        profile_urls: List[str] = []
        total: Optional[int] = None
        error: Optional[Dict[str, Any]] = None

        try:
            await driver.goto(LinkedinUrls.CONNECTIONS, timeout=Timeouts.NAVIGATION)
            total = parse_count(await driver.text(S.CONNECTIONS_HEADER, timeout=Timeouts.RESULTS_LOAD))
            target = min(total, limit)

            while len(profile_urls) < target:
                collected = len(profile_urls)

                await self._close_chat_bubbles(driver, human)
                await self._browse(driver, human)
                await self.retry_step(lambda: self._load_more(driver, human))

                for href in await driver.attribute_values(S.CONNECTION_CARD_LINK, "href"):
                    url = absolute_profile_url(href)
                    if url not in profile_urls:
                        profile_urls.append(url)

                logger.info(f"Collected {len(profile_urls)} connections out of {total}")
                if len(profile_urls) == collected:
                    logger.info("No new connections loaded, stopping")
                    break
        except Exception as e:
            classified = classify(e)
            if classified.is_critical:
                raise
            logger.warning(
                f"Connection discovery stopped after {len(profile_urls)} profiles: "
                f"{classified.message}"
            )
            error = classified.to_dict()

        return {
            "profileUrls": profile_urls[:limit],
            "totalConnections": total,
            "error": error,
        }

    async def _close_chat_bubbles(self, driver: PageDriver, human: HumanSimulator) -> None:
        # Open chat overlays cover the list and swallow clicks
        for _ in range(await driver.count(S.ACTIVE_CHAT_BUBBLE_HEADER)):
            await driver.wait_for(S.ACTIVE_CHAT_BUBBLE_HEADER, timeout=Timeouts.SELECTOR_WAIT)
            await human.click(S.ACTIVE_CHAT_BUBBLE_HEADER)
            await human.pause(Delays.MEDIUM)

    async def _browse(self, driver: PageDriver, human: HumanSimulator) -> None:
        viewport = await driver.viewport_height()
        down = human.random_scroll_distance(viewport)
        up = human.random_scroll_distance(viewport)

        await human.smooth_scroll(down, "down")
        await human.pause(Delays.BETWEEN_SCROLLS)
        await human.smooth_scroll(up, "up")
        if human.chance(0.2):
            await human.smooth_scroll(up, "up")
            await human.pause((1.0, 2.0))
        if human.chance(0.5):
            await human.smooth_scroll(down, "up")
            if human.chance(0.2):
                await human.wander()
            else:
                await human.pause(Delays.BETWEEN_SCROLLS)
        await human.pause(Delays.AFTER_SCROLL_CYCLE)

        await human.smooth_scroll(await driver.scroll_height(), "down")
        await human.pause(Delays.BETWEEN_SCROLLS)
        if human.chance(0.2):
            await human.wander()

    async def _load_more(self, driver: PageDriver, human: HumanSimulator) -> None:
        if await driver.count(S.SHOW_MORE_RESULTS) == 0:
            return
        await driver.scroll_into_view(S.SHOW_MORE_RESULTS, timeout=Timeouts.SELECTOR_WAIT)
        if await driver.is_visible(S.SHOW_MORE_RESULTS):
            logger.debug("Clicking 'Show more results'")
            await human.click(S.SHOW_MORE_RESULTS)
            await human.pause(Delays.AFTER_LOAD_MORE)
