"""Root conftest — shared test configuration and fixtures."""

import os

import pytest

# Tests must not pick up a developer's .env overrides
os.environ.setdefault("PARAMSCHEMA_LOG_FORMAT", "text")
os.environ.setdefault("PARAMSCHEMA_REJECT_REQUIRED_DEFAULTS", "false")

from paramschema.config import get_settings  # noqa: E402
from paramschema.core.diagnostics import CollectingSink  # noqa: E402


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture(autouse=True)
def _fresh_settings():
    """get_settings is lru_cached — clear it so env changes in a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
