"""Shared pytest fixtures for ChannelScope test suite.

Provides the test environment, fast retry settings, and a scripted channel
provider used across all test modules.
"""

import os
from typing import Any

import pytest

from packages.common.config import ResolutionSettings, YouTubeProviderSettings, get_config
from tests.utils.fakes import FakeChannelProvider

# ========== Test Environment Setup ==========


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables before any tests run.

    Keeps get_config() away from a developer's real credentials and gives every
    test the same deterministic configuration.
    """
    os.environ["YOUTUBE_API_KEY"] = "test-key"
    os.environ.setdefault("LOG_LEVEL", "INFO")
    get_config.cache_clear()

    yield

    get_config.cache_clear()


# ========== Configuration Fixtures ==========


@pytest.fixture
def fast_settings() -> ResolutionSettings:
    """Resolution settings with retries but no backoff sleeps.

    Returns:
        ResolutionSettings: Three attempts, zero delay.
    """
    return ResolutionSettings(max_attempts=3, base_delay=0.0, max_delay=0.0)


@pytest.fixture
def provider_settings() -> YouTubeProviderSettings:
    """Provider settings pointing at fake upstream hosts.

    Returns:
        YouTubeProviderSettings: Settings with a test API key.
    """
    return YouTubeProviderSettings(
        api_key="test-key",
        data_api_base_url="https://data.test/youtube/v3",
        innertube_base_url="https://innertube.test/youtubei/v1",
        timeout=5.0,
        search_max_results=3,
    )


# ========== Provider Fixtures ==========


@pytest.fixture
def provider() -> FakeChannelProvider:
    """Scripted in-memory channel provider.

    Returns:
        FakeChannelProvider: Provider with no scripted lookups.
    """
    return FakeChannelProvider()


# ========== Pytest Configuration ==========


def pytest_configure(config: Any) -> None:
    """Configure pytest markers.

    Args:
        config: pytest config object.
    """
    config.addinivalue_line(
        "markers",
        "unit: Fast unit tests with mocked dependencies (no network required)",
    )
    config.addinivalue_line(
        "markers",
        "integration: Tests that call the live YouTube APIs (need YOUTUBE_API_KEY)",
    )
