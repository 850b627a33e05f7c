"""Pytest configuration and shared fixtures for xdpi tests

This module provides common fixtures and record builders used across the
unit tests. No test needs a running X server.
"""

import logging
from pathlib import Path
from typing import Generator

import pytest

from xdpi.common.config import Config, ConfigLoader
from xdpi.common.settings import settings


@pytest.fixture
def sample_config() -> Config:
    """Load the sample configuration shipped at the repository root

    Returns:
        Config object with sample values
    """
    config_path = Path(__file__).parent.parent / "config.yml"
    if not config_path.exists():
        pytest.skip("config.yml not found - required for this test")
    return ConfigLoader.config_load(config_path)


@pytest.fixture(autouse=True)
def reset_settings() -> Generator[None, None, None]:
    """Reset settings singleton between tests

    Every test starts with the built-in defaults.
    """
    settings._config = None
    yield
    settings._config = None


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Setup logging for tests"""
    caplog.set_level(logging.DEBUG)
