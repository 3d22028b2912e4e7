"""Fixtures for F3 tests - configuration, Web API and CLI."""

import pytest

from manuscript_import.config.app_config import clear_config_cache
from manuscript_import.web.detection import reset_detector


@pytest.fixture(autouse=True)
def fresh_state():
    """Clear cached config and the shared detector around each test."""
    clear_config_cache()
    reset_detector()
    yield
    clear_config_cache()
    reset_detector()
