"""Tests for the connections archive download."""

import io
import sys
import zipfile
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from browser_runner.constants import LinkedinSelectors as S, LinkedinUrls
from browser_runner.core.exceptions import ArchiveNotReadyError
from browser_runner.models.payloads import DownloadConnectionsPayload
from browser_runner.services.actions.download import (
    DownloadConnectionsAction,
    extract_connection_urls,
)
from browser_runner.services.browser.session import SessionSpec
from tests.helpers import FakePageDriver, FakeSessionFactory, make_settings

CONNECTIONS_CSV = (
    "\ufeffNotes:\n"
    '"When exporting your connection data, you may notice that some of the email addresses are missing."\n'
    "\n"
    "First Name,Last Name,URL,Email Address,Company,Position,Connected On\n"
    "Jane,Doe,https://www.linkedin.com/in/jane-doe,,Acme,Engineer,01 May 2024\n"
    '"Roe, John",,https://www.linkedin.com/in/john-roe,john@example.com,,,02 May 2024\n'
    "No,Url,,,,,03 May 2024\n"
)


def build_archive(files) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content.encode("utf-8"))
    return buffer.getvalue()


def ready_driver(**page) -> FakePageDriver:
    return FakePageDriver(
        texts={S.DOWNLOAD_BUTTON: "Download archive"},
        download=build_archive({"Connections.csv": CONNECTIONS_CSV}),
        **page,
    )


async def download(settings, driver, dry_run=False):
    action = DownloadConnectionsAction(FakeSessionFactory(driver), settings)
    return await action.execute(SessionSpec(), DownloadConnectionsPayload(dry_run=dry_run))


class TestExtractConnectionUrls:
    """Tests for extract_connection_urls."""

    def test_reads_urls_after_preamble(self):
        """Test each data row contributes its first http cell."""
        urls = extract_connection_urls(build_archive({"Connections.csv": CONNECTIONS_CSV}))

        assert urls == [
            "https://www.linkedin.com/in/jane-doe",
            "https://www.linkedin.com/in/john-roe",
        ]

    def test_uses_first_csv_in_archive(self):
        """Test non-CSV members are ignored."""
        archive = build_archive({"README.txt": "hello", "Connections.csv": CONNECTIONS_CSV})

        assert len(extract_connection_urls(archive)) == 2

    def test_archive_without_csv(self):
        """Test an archive without a CSV yields no URLs."""
        assert extract_connection_urls(build_archive({"README.txt": "hello"})) == []

    def test_not_a_zip(self):
        """Test garbage bytes are rejected."""
        with pytest.raises(zipfile.BadZipFile):
            extract_connection_urls(b"not a zip")


class TestDownloadConnections:
    """Tests for DownloadConnectionsAction."""

    @pytest.mark.asyncio
    async def test_ready_archive_is_downloaded(self, settings):
        """Test a ready archive is downloaded without a new request."""
        driver = ready_driver()

        result = await download(settings, driver)

        assert result == {
            "profileUrls": [
                "https://www.linkedin.com/in/jane-doe",
                "https://www.linkedin.com/in/john-roe",
            ],
            "dryRun": False,
        }
        assert driver.calls[0] == ("goto", LinkedinUrls.DATA_EXPORT)
        assert not driver.clicked(S.REQUEST_ARCHIVE_BUTTON)
        assert not driver.calls_of("reload")

    @pytest.mark.asyncio
    async def test_requests_archive_then_polls(self, settings):
        """Test a missing archive is requested and the page polled until ready."""

        def archive_ready(page):
            page.missing.discard(S.DOWNLOAD_BUTTON)

        driver = ready_driver(missing={S.DOWNLOAD_BUTTON}, on_reload=archive_ready)

        result = await download(settings, driver)

        assert len(result["profileUrls"]) == 2
        assert [call[1] for call in driver.calls_of("click")] == [
            S.FAST_FILE_LABEL,
            S.CONNECTIONS_FILE_LABEL,
            S.REQUEST_ARCHIVE_BUTTON,
            S.DOWNLOAD_BUTTON,
        ]
        assert len(driver.calls_of("reload")) == 1

    @pytest.mark.asyncio
    async def test_gives_up_after_max_polls(self):
        """Test a pending archive fails once the poll budget is spent."""
        settings = make_settings(download_max_polls=2)
        driver = FakePageDriver(
            texts={S.DOWNLOAD_BUTTON: "Request pending"},
            enabled={S.DOWNLOAD_BUTTON: False},
        )

        with pytest.raises(ArchiveNotReadyError) as exc_info:
            await download(settings, driver)

        assert exc_info.value.details == {"polls": 2}
        assert len(driver.calls_of("reload")) == 2
        assert not driver.calls_of("expect_download")

    @pytest.mark.asyncio
    async def test_dry_run_never_requests(self, settings):
        """Test a dry run with no ready archive neither requests nor polls."""
        driver = FakePageDriver(missing={S.DOWNLOAD_BUTTON})

        result = await download(settings, driver, dry_run=True)

        assert result == {"profileUrls": [], "dryRun": True}
        assert not driver.calls_of("click")
        assert not driver.calls_of("reload")

    @pytest.mark.asyncio
    async def test_dry_run_downloads_ready_archive(self, settings):
        """Test a dry run still reads an archive that is already ready."""
        driver = ready_driver()

        result = await download(settings, driver, dry_run=True)

        assert len(result["profileUrls"]) == 2
        assert result["dryRun"] is True
