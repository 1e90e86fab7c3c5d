"""Download the connections export from the data-privacy settings page."""

import csv
import io
import zipfile
from enum import Enum
from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_runner.constants import Delays, LinkedinSelectors as S, LinkedinUrls, Timeouts
from browser_runner.core.enums import RunType
from browser_runner.core.exceptions import ArchiveNotReadyError
from browser_runner.models.payloads import DownloadConnectionsPayload
from browser_runner.services.actions.base import BaseAction
from browser_runner.services.browser.page_driver import PageDriver
from browser_runner.utils.anti_detection.human_simulator import HumanSimulator

# Notes block that precedes the header row of the exported CSV
CSV_PREAMBLE_LINES = 4


class ArchiveState(str, Enum):
    """State of the data-export download button."""

    READY = "ready"
    PENDING = "pending"


def extract_connection_urls(archive: bytes) -> List[str]:
    """
    Read profile URLs from a connections export archive.

    Uses the first CSV in the archive. After the preamble, each row
    contributes its first cell that starts with "http".

    Args:
        archive: Zip file bytes

    Returns:
        Profile URLs in file order

    Raises:
        zipfile.BadZipFile: If ``archive`` is not a zip file
    """
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        csv_name = next((name for name in zf.namelist() if name.endswith(".csv")), None)
        if csv_name is None:
            logger.warning("Connections archive contains no CSV file")
            return []
        text = zf.read(csv_name).decode("utf-8-sig")

    urls: List[str] = []
    rows = csv.reader(text.splitlines()[CSV_PREAMBLE_LINES:])
    for row in rows:
        url = next((cell for cell in row if cell.startswith("http")), None)
        if url:
            urls.append(url)
    return urls


class DownloadConnectionsAction(BaseAction):
    """
    Request (if needed), wait for and download the connections archive.

    In dry-run mode no archive is requested: an archive that is already
    ready is downloaded and parsed, otherwise the run ends with no URLs.
    """

    run_type = RunType.DOWNLOAD_CONNECTIONS
    payload_model = DownloadConnectionsPayload

    async def perform(
        self,
        driver: PageDriver,
        human: HumanSimulator,
        payload: DownloadConnectionsPayload,
    ) -> Dict[str, Any]:
        await driver.goto(LinkedinUrls.DATA_EXPORT, timeout=Timeouts.NAVIGATION)
        state = await self._archive_state(driver)

        if state is not ArchiveState.READY and payload.dry_run:
            logger.info("Dry run: connections archive not ready and not requested")
            return {"profileUrls": [], "dryRun": True}

        if state is None:
            await self._request_archive(driver, human)

        polls = 0
        while state is not ArchiveState.READY:
            if polls >= self.settings.download_max_polls:
                raise ArchiveNotReadyError(polls)
            await driver.reload(timeout=Timeouts.NAVIGATION)
            logger.info("Reloaded data export page to check if the download can start")
            interval = self.settings.download_poll_interval
            await human.pause((interval, interval))
            polls += 1
            state = await self._archive_state(driver)

        archive = await driver.expect_download(
            lambda: human.click(S.DOWNLOAD_BUTTON, frame=S.SETTINGS_IFRAME),
            timeout=Timeouts.DOWNLOAD,
        )
        profile_urls = extract_connection_urls(archive)
        logger.info(f"Connections archive processed: {len(profile_urls)} profiles")
        return {"profileUrls": profile_urls, "dryRun": payload.dry_run}

    async def _archive_state(self, driver: PageDriver) -> Optional[ArchiveState]:
        try:
            await driver.wait_for(
                S.DOWNLOAD_BUTTON, timeout=Timeouts.SELECTOR_WAIT, frame=S.SETTINGS_IFRAME
            )
        except PlaywrightTimeoutError:
            logger.info("Download button was not found")
            return None

        label = await driver.text(S.DOWNLOAD_BUTTON, frame=S.SETTINGS_IFRAME)
        if "Download" in label:
            return ArchiveState.READY
        if not await driver.is_enabled(S.DOWNLOAD_BUTTON, frame=S.SETTINGS_IFRAME):
            logger.info("Download button was found but it's disabled")
            return ArchiveState.PENDING
        return ArchiveState.READY

    async def _request_archive(self, driver: PageDriver, human: HumanSimulator) -> None:
        frame = S.SETTINGS_IFRAME
        await driver.wait_for(S.FAST_FILE_LABEL, timeout=Timeouts.SELECTOR_WAIT, frame=frame)
        await human.click(S.FAST_FILE_LABEL, frame=frame)
        await human.pause(Delays.MEDIUM)
        await human.click(S.CONNECTIONS_FILE_LABEL, frame=frame)
        await human.pause(Delays.MEDIUM)
        await driver.wait_for(S.REQUEST_ARCHIVE_BUTTON, timeout=Timeouts.SELECTOR_WAIT, frame=frame)
        await human.click(S.REQUEST_ARCHIVE_BUTTON, frame=frame)
        logger.info("Connections archive requested")
