"""Read-only profile lookups: connection status and recent posts."""

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_runner.constants import Delays, LinkedinSelectors as S, Timeouts
from browser_runner.core.enums import ConnectionStatus, RunType
from browser_runner.models.payloads import ProfilePayload
from browser_runner.services.actions.base import BaseAction
from browser_runner.services.browser.page_driver import PageDriver
from browser_runner.utils.anti_detection.human_simulator import HumanSimulator


async def _probe_label(driver: PageDriver, button: str) -> Optional[str]:
    """Label of a profile action button, or None if it does not appear quickly."""
    try:
        await driver.wait_for(button, state="attached", timeout=Timeouts.PROBE)
        return await driver.text(f"{button} {S.PROFILE_ACTION_LABEL}", timeout=Timeouts.PROBE)
    except PlaywrightTimeoutError:
        return None


class ConnectionStatusAction(BaseAction):
    """Work out whether the session owner is connected to a profile."""

    run_type = RunType.CHECK_CONNECTION_STATUS
    payload_model = ProfilePayload

    async def perform(
        self,
        driver: PageDriver,
        human: HumanSimulator,
        payload: ProfilePayload,
    ) -> Dict[str, Any]:
        await driver.goto(payload.profile_url, timeout=Timeouts.NAVIGATION)
        status = await self._status(driver, human)
        logger.info(f"Connection status for {payload.profile_url}: {status.value}")
        return {"profileUrl": payload.profile_url, "connectionStatus": status.value}

    async def _status(self, driver: PageDriver, human: HumanSimulator) -> ConnectionStatus:
        if await _probe_label(driver, S.PENDING_BUTTON) == "Pending":
            return ConnectionStatus.PENDING

        label = await _probe_label(driver, S.SECONDARY_ACTION_BUTTON)
        if label == "Connect":
            return ConnectionStatus.NOT_SENT

        # Creators show Follow as the primary action and hide Connect in the menu
        if label == "Follow":
            try:
                await human.click(S.DROPDOWN_TRIGGER, timeout=Timeouts.PROBE)
                await driver.wait_for(S.MORE_ACTIONS_DROPDOWN, timeout=Timeouts.PROBE)
            except PlaywrightTimeoutError:
                return ConnectionStatus.ACCEPTED
            if await driver.count(S.DROPDOWN_CONNECT_ITEM) > 0:
                return ConnectionStatus.NOT_SENT

        return ConnectionStatus.ACCEPTED


class RecentPostsAction(BaseAction):
    """Collect links to a profile's recent posts."""

    run_type = RunType.GET_RECENT_POSTS
    payload_model = ProfilePayload

    async def perform(
        self,
        driver: PageDriver,
        human: HumanSimulator,
        payload: ProfilePayload,
    ) -> Dict[str, Any]:
        await driver.goto(payload.profile_url, timeout=Timeouts.NAVIGATION)
        await human.pause(Delays.PAGE_SETTLE)

        posts: List[str] = []
        if await driver.is_visible(S.NO_POSTS_TEXT):
            logger.info(f"{payload.profile_url} has not posted yet")
        elif not await driver.is_visible(S.POSTS_LIST):
            logger.info(f"No activity section on {payload.profile_url}")
        else:
            for href in await driver.attribute_values(S.POST_LINKS, "href"):
                if "/feed/update/" in href and href not in posts:
                    posts.append(href)

        return {"profileUrl": payload.profile_url, "recentPosts": posts}
