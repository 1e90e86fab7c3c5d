"""Tests for connection status and recent posts lookups."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from browser_runner.constants import LinkedinSelectors as S
from browser_runner.models.payloads import ProfilePayload
from browser_runner.services.actions.profile import ConnectionStatusAction, RecentPostsAction
from browser_runner.services.browser.session import SessionSpec
from tests.helpers import FakePageDriver, FakeSessionFactory

PROFILE_URL = "https://www.linkedin.com/in/jane-doe"
PENDING_LABEL = f"{S.PENDING_BUTTON} {S.PROFILE_ACTION_LABEL}"
SECONDARY_LABEL = f"{S.SECONDARY_ACTION_BUTTON} {S.PROFILE_ACTION_LABEL}"


async def status_for(settings, driver: FakePageDriver) -> str:
    action = ConnectionStatusAction(FakeSessionFactory(driver), settings)
    result = await action.execute(SessionSpec(), ProfilePayload(profile_url=PROFILE_URL))
    assert result["profileUrl"] == PROFILE_URL
    return result["connectionStatus"]


class TestConnectionStatus:
    """Tests for ConnectionStatusAction."""

    @pytest.mark.asyncio
    async def test_pending(self, settings):
        """Test a muted Pending button means the invite is pending."""
        driver = FakePageDriver(texts={PENDING_LABEL: "Pending"})

        assert await status_for(settings, driver) == "Pending"

    @pytest.mark.asyncio
    async def test_connect_button_means_not_sent(self, settings):
        """Test a secondary Connect button means no invite was sent."""
        driver = FakePageDriver(
            missing={S.PENDING_BUTTON}, texts={SECONDARY_LABEL: "Connect"}
        )

        assert await status_for(settings, driver) == "Not Sent"

    @pytest.mark.asyncio
    async def test_follow_with_connect_in_menu(self, settings):
        """Test creators with Connect hidden in the menu are not connected."""
        driver = FakePageDriver(
            missing={S.PENDING_BUTTON},
            texts={SECONDARY_LABEL: "Follow"},
            counts={S.DROPDOWN_CONNECT_ITEM: 1},
        )

        assert await status_for(settings, driver) == "Not Sent"
        assert driver.clicked(S.DROPDOWN_TRIGGER)

    @pytest.mark.asyncio
    async def test_follow_without_connect_in_menu(self, settings):
        """Test creators already connected have no Connect menu entry."""
        driver = FakePageDriver(missing={S.PENDING_BUTTON}, texts={SECONDARY_LABEL: "Follow"})

        assert await status_for(settings, driver) == "Accepted"

    @pytest.mark.asyncio
    async def test_follow_menu_does_not_open(self, settings):
        """Test a dropdown that never appears falls back to Accepted."""
        driver = FakePageDriver(
            missing={S.PENDING_BUTTON, S.MORE_ACTIONS_DROPDOWN},
            texts={SECONDARY_LABEL: "Follow"},
        )

        assert await status_for(settings, driver) == "Accepted"

    @pytest.mark.asyncio
    async def test_no_action_buttons(self, settings):
        """Test a profile with only a Message button is connected."""
        driver = FakePageDriver(missing={S.PENDING_BUTTON, S.SECONDARY_ACTION_BUTTON})

        assert await status_for(settings, driver) == "Accepted"
        assert not driver.calls_of("click")


class TestRecentPosts:
    """Tests for RecentPostsAction."""

    @pytest.mark.asyncio
    async def test_collects_unique_post_links(self, settings):
        """Test only feed update links are kept, once each."""
        post = "https://www.linkedin.com/feed/update/urn:li:activity:1/"
        driver = FakePageDriver(
            visible={S.POSTS_LIST: True},
            attributes={
                S.POST_LINKS: [[post, "https://www.linkedin.com/in/jane-doe/", post]]
            },
        )
        action = RecentPostsAction(FakeSessionFactory(driver), settings)

        result = await action.execute(SessionSpec(), ProfilePayload(profile_url=PROFILE_URL))

        assert result == {"profileUrl": PROFILE_URL, "recentPosts": [post]}

    @pytest.mark.asyncio
    async def test_profile_without_posts(self, settings):
        """Test the no-posts notice yields an empty list."""
        driver = FakePageDriver(visible={S.NO_POSTS_TEXT: True, S.POSTS_LIST: True})
        action = RecentPostsAction(FakeSessionFactory(driver), settings)

        result = await action.execute(SessionSpec(), ProfilePayload(profile_url=PROFILE_URL))

        assert result["recentPosts"] == []
        assert not driver.calls_of("attribute_values")

    @pytest.mark.asyncio
    async def test_profile_without_activity_section(self, settings):
        """Test a missing activity section yields an empty list."""
        driver = FakePageDriver()
        action = RecentPostsAction(FakeSessionFactory(driver), settings)

        result = await action.execute(SessionSpec(), ProfilePayload(profile_url=PROFILE_URL))

        assert result["recentPosts"] == []
