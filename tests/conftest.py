"""Root conftest — shared test configuration."""

import pytest

from resilient_aws.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are lru_cached per process; tests that set env vars need a clean cache."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
