"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration and marker
registration. Fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os

import pytest

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_trydo_env(request, monkeypatch):
    """Clear TRYDO_* variables and the cached default configuration.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    monkeypatch.setattr("trydo.config._DEFAULT", None)
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("TRYDO_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging & Markers
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests",
        "slow: Tests that take >1 second",
        "allow_dotenv: Let python-dotenv read .env files",
        "allow_env_pollution: Keep TRYDO_* variables from the outer environment",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)
