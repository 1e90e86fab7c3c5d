"""Tests for connection discovery."""

import random
import sys
from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

sys.path.insert(0, str(Path(__file__).parent.parent))

from browser_runner.constants import LinkedinSelectors as S, LinkedinUrls
from browser_runner.models.payloads import FindConnectionsPayload
from browser_runner.services.actions.base import absolute_profile_url, parse_count
from browser_runner.services.actions.connections import FindConnectionsAction
from browser_runner.services.browser.session import SessionSpec
from browser_runner.core.exceptions import InteractionError
from tests.helpers import FakePageDriver, FakeSessionFactory


def connections_driver(total="3 Connections", batches=None, **page) -> FakePageDriver:
    batches = batches or [["/in/a/?miniProfileUrn=1", "/in/b/"], ["/in/a/", "/in/b/", "/in/c/"]]
    return FakePageDriver(
        texts={S.CONNECTIONS_HEADER: total},
        attributes={S.CONNECTION_CARD_LINK: batches},
        **page,
    )


def show_more_clicks(driver):
    return [call for call in driver.calls_of("click") if call[1] == S.SHOW_MORE_RESULTS]


async def find(settings, driver, max_results=None):
    action = FindConnectionsAction(FakeSessionFactory(driver), settings, random.Random(1))
    return await action.execute(SessionSpec(), FindConnectionsPayload(max_results=max_results))


class TestHelpers:
    """Tests for the shared URL and count helpers."""

    def test_parse_count(self):
        """Test counts with separators are read as integers."""
        assert parse_count("1,204 Connections") == 1204

    def test_parse_count_without_digits(self):
        """Test text without digits is an interaction error."""
        with pytest.raises(InteractionError):
            parse_count("Connections")

    def test_absolute_profile_url(self):
        """Test relative links become absolute and lose their query."""
        assert absolute_profile_url("/in/a/?x=1") == "https://www.linkedin.com/in/a/"
        assert absolute_profile_url("https://www.linkedin.com/in/b/") == "https://www.linkedin.com/in/b/"


class TestFindConnections:
    """Tests for FindConnectionsAction."""

    @pytest.mark.asyncio
    async def test_collects_until_total(self, settings):
        """Test collection stops once every connection is seen."""
        driver = connections_driver()

        result = await find(settings, driver)

        assert result == {
            "profileUrls": [
                "https://www.linkedin.com/in/a/",
                "https://www.linkedin.com/in/b/",
                "https://www.linkedin.com/in/c/",
            ],
            "totalConnections": 3,
            "error": None,
        }
        assert driver.calls[0] == ("goto", LinkedinUrls.CONNECTIONS)

    @pytest.mark.asyncio
    async def test_respects_max_results(self, settings):
        """Test maxResults caps the returned list."""
        driver = connections_driver(total="500 Connections")

        result = await find(settings, driver, max_results=2)

        assert len(result["profileUrls"]) == 2
        assert result["totalConnections"] == 500

    @pytest.mark.asyncio
    async def test_default_limit_from_settings(self, settings):
        """Test the configured cap applies when maxResults is absent."""
        settings.max_connections = 1
        driver = connections_driver(total="500 Connections")

        result = await find(settings, driver)

        assert result["profileUrls"] == ["https://www.linkedin.com/in/a/"]

    @pytest.mark.asyncio
    async def test_stops_when_nothing_new_loads(self, settings):
        """Test an exhausted list ends the loop."""
        driver = connections_driver(total="10 Connections", batches=[["/in/a/"]])

        result = await find(settings, driver)

        assert result["profileUrls"] == ["https://www.linkedin.com/in/a/"]
        assert result["error"] is None

    @pytest.mark.asyncio
    async def test_clicks_show_more_and_closes_chat(self, settings):
        """Test load-more is clicked and chat overlays are closed."""
        driver = connections_driver(
            counts={S.SHOW_MORE_RESULTS: 1, S.ACTIVE_CHAT_BUBBLE_HEADER: 1},
            visible={S.SHOW_MORE_RESULTS: True},
        )

        await find(settings, driver)

        assert driver.clicked(S.SHOW_MORE_RESULTS)
        assert len(show_more_clicks(driver)) == 2
        assert driver.clicked(S.ACTIVE_CHAT_BUBBLE_HEADER)

    @pytest.mark.asyncio
    async def test_load_more_retried(self, settings):
        """Test a flaky load-more click is retried."""
        driver = connections_driver(
            counts={S.SHOW_MORE_RESULTS: 1},
            visible={S.SHOW_MORE_RESULTS: True},
            failures={("click", S.SHOW_MORE_RESULTS): [PlaywrightTimeoutError("Timeout")]},
        )

        result = await find(settings, driver)

        assert result["error"] is None
        assert len(result["profileUrls"]) == 3
        # one failed click, its retry, then the second batch
        assert len(show_more_clicks(driver)) == 3

    @pytest.mark.asyncio
    async def test_partial_result_on_failure(self, settings):
        """Test a mid-way failure keeps the collected URLs and reports the error."""
        driver = connections_driver(
            total="10 Connections",
            failures={
                ("attribute_values", S.CONNECTION_CARD_LINK): [
                    None,
                    PlaywrightTimeoutError("Timeout 10000ms exceeded."),
                ]
            },
        )

        result = await find(settings, driver)

        assert result["profileUrls"] == [
            "https://www.linkedin.com/in/a/",
            "https://www.linkedin.com/in/b/",
        ]
        assert result["totalConnections"] == 10
        assert result["error"]["code"] == "EXTERNAL_ERROR"
        assert result["error"]["message"] == "Timeout 10000ms exceeded."

    @pytest.mark.asyncio
    async def test_session_invalidation_is_raised(self, settings):
        """Test a redirect loop is not swallowed into a partial result."""
        driver = connections_driver(
            failures={
                ("goto", LinkedinUrls.CONNECTIONS): [
                    PlaywrightError("net::ERR_TOO_MANY_REDIRECTS at connections")
                ]
            }
        )

        with pytest.raises(PlaywrightError):
            await find(settings, driver)
