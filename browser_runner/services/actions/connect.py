"""Send a connection invitation to a profile."""

from typing import Any, Dict

from loguru import logger

from browser_runner.constants import Delays, LinkedinSelectors as S, Timeouts
from browser_runner.core.enums import RunType
from browser_runner.core.exceptions import ActionNotApplicableError, ElementNotFoundError
from browser_runner.models.payloads import SendConnectionRequestPayload
from browser_runner.services.actions.base import BaseAction
from browser_runner.services.browser.page_driver import PageDriver
from browser_runner.utils.anti_detection.human_simulator import HumanSimulator

INVITE_SENT_MESSAGE = "Connection invite sent successfully"

# Profile pages render the action bar twice (sticky header and main card);
# the last match is the one in the main card.
_LAST = -1


class SendConnectionRequestAction(BaseAction):
    """
    Invite a profile to connect, optionally with a note.

    The connect control is looked up in order: the primary button, then the
    entry inside the "More actions" menu. A profile whose menu has no
    connect entry is treated as already connected.
    """

    run_type = RunType.SEND_CONNECTION_REQUEST
    payload_model = SendConnectionRequestPayload

    async def perform(
        self,
        driver: PageDriver,
        human: HumanSimulator,
        payload: SendConnectionRequestPayload,
    ) -> Dict[str, Any]:
        await driver.goto(payload.profile_url, timeout=Timeouts.NAVIGATION)
        await driver.wait_for(S.PROFILE_NAME, timeout=Timeouts.SELECTOR_WAIT)
        profile_name = await driver.text(S.PROFILE_NAME)
        await human.pause(Delays.PROFILE_SETTLE)

        await self._open_invite(driver, human, profile_name, payload.profile_url)
        await driver.wait_for(S.INVITE_MODAL, timeout=Timeouts.SELECTOR_WAIT)

        if payload.message:
            await human.click(S.ADD_NOTE_BUTTON)
            await driver.wait_for(S.NOTE_INPUT, timeout=Timeouts.SELECTOR_WAIT)
            await human.type(S.NOTE_INPUT, payload.message)
            submit = S.SEND_INVITE_BUTTON
        else:
            submit = S.SEND_WITHOUT_NOTE_BUTTON

        await driver.wait_for(submit, timeout=Timeouts.SELECTOR_WAIT)
        await human.pause(Delays.BEFORE_SUBMIT)

        if payload.dry_run:
            logger.info(f"Dry run: invitation to {payload.profile_url} not submitted")
        else:
            await human.click(submit)
            logger.info(f"Invitation sent to {payload.profile_url}")

        return {
            "profileUrl": payload.profile_url,
            "message": INVITE_SENT_MESSAGE,
            "dryRun": payload.dry_run,
        }

    async def _open_invite(
        self,
        driver: PageDriver,
        human: HumanSimulator,
        profile_name: str,
        profile_url: str,
    ) -> None:
        connect_button = S.connect_button(profile_name)
        if await driver.count(connect_button) > 0:
            await human.click(connect_button, nth=_LAST)
            return

        if await driver.count(S.MORE_ACTIONS_BUTTON) == 0:
            raise ElementNotFoundError(
                "Connect button and More button missing.",
                selectors=[connect_button, S.MORE_ACTIONS_BUTTON],
                details={"profileUrl": profile_url},
            )

        await human.click(S.MORE_ACTIONS_BUTTON, nth=_LAST)
        await driver.wait_for(S.MORE_ACTIONS_DROPDOWN, timeout=Timeouts.SELECTOR_WAIT, nth=_LAST)

        menu_item = S.connect_menu_item(profile_name)
        if await driver.count(menu_item) == 0:
            raise ActionNotApplicableError(
                "Connect button not found. Profile might be already a connection.",
                details={"profileUrl": profile_url},
            )

        await driver.scroll_into_view(menu_item, nth=_LAST)
        await human.click(menu_item, nth=_LAST)
