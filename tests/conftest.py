"""Configuration file for pytest containing fixtures and configuration.

This module provides fixtures that can be used across multiple test files:
- reset_config_cache: Clears cached configuration files between tests
- isolated_env: Removes polylint environment variables for each test
"""

import pytest

from polylint.compiler.config_loader import clear_config_cache


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Fixture that clears the configuration cache around every test."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Fixture that removes polylint environment overrides."""
    for var in ("POLYLINT_CONFIG_PATH", "POLYLINT_LOG_LEVEL", "POLYLINT_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
