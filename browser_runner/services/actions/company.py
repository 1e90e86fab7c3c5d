"""Enumerate the people listed on a company page."""

from typing import Any, Dict, List
from urllib.parse import quote

from loguru import logger

from browser_runner.constants import Delays, LinkedinSelectors as S, LinkedinUrls, Timeouts
from browser_runner.core.enums import RunType
from browser_runner.models.payloads import FindCompanyPeoplePayload
from browser_runner.services.actions.base import BaseAction, absolute_profile_url, parse_count
from browser_runner.services.browser.page_driver import PageDriver
from browser_runner.utils.anti_detection.human_simulator import HumanSimulator


class FindCompanyPeopleAction(BaseAction):
    """Scroll a company's people tab and collect member profile URLs."""

    run_type = RunType.FIND_COMPANY_PEOPLE
    payload_model = FindCompanyPeoplePayload

    async def perform(
        self,
        driver: PageDriver,
        human: HumanSimulator,
        payload: FindCompanyPeoplePayload,
    ) -> Dict[str, Any]:
        url = LinkedinUrls.COMPANY_PEOPLE.format(company=quote(payload.company_name, safe=""))
        await driver.goto(url, timeout=Timeouts.NAVIGATION)
        total = parse_count(
            await driver.text(S.COMPANY_PEOPLE_TOTAL, timeout=Timeouts.RESULTS_LOAD, nth=0)
        )

        profile_urls: List[str] = []
        last_height = 0
        while len(profile_urls) < total:
            viewport = await driver.viewport_height()
            await human.smooth_scroll(human.random_scroll_distance(viewport), "down")
            await human.pause(Delays.PAGE_SETTLE)
            await self.retry_step(lambda: self._load_more(driver, human))

            for href in await driver.attribute_values(S.COMPANY_PROFILE_LINK, "href"):
                profile_url = absolute_profile_url(href)
                if profile_url not in profile_urls:
                    profile_urls.append(profile_url)
            logger.info(f"Collected {len(profile_urls)} of {total} people at {payload.company_name}")

            if len(profile_urls) >= total:
                break

            height = await driver.scroll_height()
            if height == last_height:
                logger.info("Page stopped growing, stopping")
                break
            last_height = height

        return {"companyName": payload.company_name, "profileUrls": profile_urls}

    async def _load_more(self, driver: PageDriver, human: HumanSimulator) -> None:
        if await driver.is_visible(S.COMPANY_SHOW_MORE):
            await human.click(S.COMPANY_SHOW_MORE)
            await human.pause(Delays.PAGE_SETTLE)
