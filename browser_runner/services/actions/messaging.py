"""Send and read direct messages with a profile."""

from datetime import datetime, timezone
from typing import Any, Dict, List

from loguru import logger

from browser_runner.constants import Delays, LinkedinSelectors as S, LinkedinUrls, Timeouts
from browser_runner.core.enums import RunType
from browser_runner.models.payloads import ProfilePayload, SendMessagePayload
from browser_runner.services.actions.base import BaseAction
from browser_runner.services.browser.page_driver import PageDriver
from browser_runner.utils.anti_detection.human_simulator import HumanSimulator

MESSAGE_SENT_MESSAGE = "Message sent successfully"
MESSENGER_MESSAGE_TYPE = "com.linkedin.messenger.Message"


def is_messages_response(url: str) -> bool:
    """Whether a response URL is the messenger conversation GraphQL query."""
    return LinkedinUrls.MESSAGES_GRAPHQL in url and LinkedinUrls.MESSAGES_QUERY in url


def _iso_utc(delivered_at: Any) -> str:
    moment = datetime.fromtimestamp(int(delivered_at) / 1000, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_messenger_messages(data: Any) -> List[Dict[str, str]]:
    """
    Extract member messages from a messenger GraphQL response.

    Only elements of the messenger message type sent by a member are kept;
    malformed elements are skipped. Messages are returned oldest first.

    Args:
        data: Decoded JSON body

    Returns:
        List of ``{name, time, message}`` with ``time`` as ISO-8601 UTC
    """
    try:
        elements = data["data"]["messengerMessagesBySyncToken"]["elements"]
    except (KeyError, TypeError):
        elements = None
    if not isinstance(elements, list):
        logger.warning("No messages found in response")
        return []

    messages: List[Dict[str, str]] = []
    for element in elements:
        try:
            if element.get("_type") != MESSENGER_MESSAGE_TYPE:
                continue
            member = ((element.get("sender") or {}).get("participantType") or {}).get("member")
            if not member:
                continue
            messages.append(
                {
                    "name": f"{member['firstName']['text']} {member['lastName']['text']}",
                    "time": _iso_utc(element["deliveredAt"]),
                    "message": (element.get("body") or {}).get("text") or "",
                }
            )
        except (AttributeError, KeyError, TypeError, ValueError, OverflowError) as e:
            logger.warning(f"Skipping malformed message element: {e}")

    messages.sort(key=lambda m: m["time"])
    return messages


class SendMessageAction(BaseAction):
    """Open the message composer on a profile and send a message."""

    run_type = RunType.SEND_MESSAGE
    payload_model = SendMessagePayload

    async def perform(
        self,
        driver: PageDriver,
        human: HumanSimulator,
        payload: SendMessagePayload,
    ) -> Dict[str, Any]:
        await driver.goto(payload.profile_url, timeout=Timeouts.NAVIGATION)
        await driver.wait_for(S.MESSAGE_BUTTON, timeout=Timeouts.SELECTOR_WAIT)
        await human.click(S.MESSAGE_BUTTON)

        await driver.wait_for(S.MESSAGE_INPUT, timeout=Timeouts.SELECTOR_WAIT)
        await human.type(S.MESSAGE_INPUT, payload.message)
        await driver.wait_for(S.MESSAGE_SEND_BUTTON, timeout=Timeouts.SELECTOR_WAIT)
        await human.pause(Delays.BEFORE_SUBMIT)

        if payload.dry_run:
            logger.info(f"Dry run: message to {payload.profile_url} not sent")
        else:
            await human.click(S.MESSAGE_SEND_BUTTON)
            logger.info(f"Message sent to {payload.profile_url}")

        return {
            "profileUrl": payload.profile_url,
            "message": MESSAGE_SENT_MESSAGE,
            "dryRun": payload.dry_run,
        }


class GetMessagesAction(BaseAction):
    """Read the conversation with a profile from the messenger API response."""

    run_type = RunType.GET_MESSAGES
    payload_model = ProfilePayload

    async def perform(
        self,
        driver: PageDriver,
        human: HumanSimulator,
        payload: ProfilePayload,
    ) -> Dict[str, Any]:
        await driver.goto(payload.profile_url, timeout=Timeouts.NAVIGATION)
        await driver.wait_for(S.MESSAGE_BUTTON, timeout=Timeouts.SELECTOR_WAIT)

        logger.info("Waiting for messages response...")
        data = await driver.expect_json_response(
            is_messages_response,
            lambda: human.click(S.MESSAGE_BUTTON),
            timeout=Timeouts.MESSAGES_RESPONSE,
        )
        messages = parse_messenger_messages(data)
        logger.info(f"Retrieved {len(messages)} messages from {payload.profile_url}")

        return {"profileUrl": payload.profile_url, "messages": messages}
