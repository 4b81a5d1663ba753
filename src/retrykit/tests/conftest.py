"""Shared fixtures for retrykit tests."""

from __future__ import annotations

import logging

import pytest

from retrykit import clear_settings_cache
from retrykit.runtime.retry import drivers


@pytest.fixture(autouse=True)
def fresh_settings() -> object:
    """Reset cached settings before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def clean_logger() -> object:
    """Drop handlers configure_logging may have attached."""
    yield
    log = logging.getLogger("retrykit")
    for h in list(log.handlers):
        log.removeHandler(h)
    log.setLevel(logging.NOTSET)


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record blocking pauses instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr(drivers.time, "sleep", recorded.append)
    return recorded
