"""Root conftest — shared test configuration."""

import os

import pytest

from recurring_inspections.config import get_settings

# Human-readable logs if a test installs handlers
os.environ.setdefault("LOG_FORMAT", "text")


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test reads settings from the environment it sets up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
