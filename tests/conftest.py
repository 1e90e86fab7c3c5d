"""Pytest configuration and common fixtures."""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load test-specific environment file if it exists
test_env_file = Path(__file__).parent / ".env.test"
if test_env_file.exists():
    load_dotenv(test_env_file)

# Set environment before any browser_runner imports
os.environ.setdefault("ENV", "testing")

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from browser_runner.core.config.settings import reset_settings
from tests.helpers import FakePageDriver, FakeSessionFactory, make_settings


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Isolate settings and environment for every test."""
    monkeypatch.setenv("ENV", "testing")
    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost:5432/browser_automation_test")
    monkeypatch.setenv("HUMAN_TIME_SCALE", "0")
    monkeypatch.setenv("STEP_RETRY_BASE_DELAY", "0")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    """Runner settings with pauses and backoff disabled."""
    return make_settings()


@pytest.fixture
def driver():
    """Empty scripted page driver."""
    return FakePageDriver()


@pytest.fixture
def session_factory(driver):
    """Session factory handing out the ``driver`` fixture."""
    return FakeSessionFactory(driver)
