"""Tests for configuration and logging setup."""

from __future__ import annotations

import io
import json
import logging

import pytest
from pydantic import ValidationError

from retrykit import configure_logging, get_settings
from retrykit.foundation.config import LoggingSettings, RetrySettings


def test_defaults() -> None:
    settings = get_settings()
    assert settings.retry.base_delay == 50_000
    assert settings.retry.max_retries == 5
    assert settings.logging.level == "WARNING"
    assert settings.logging.format == "text"


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RETRYKIT_RETRY_MAX_RETRIES", "9")
    monkeypatch.setenv("RETRYKIT_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.retry.max_retries == 9
    assert settings.logging.level == "DEBUG"


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValidationError):
        RetrySettings(base_delay=-1)
    with pytest.raises(ValidationError):
        LoggingSettings(format="xml")


def test_configure_logging_text() -> None:
    out = io.StringIO()
    log = configure_logging(LoggingSettings(level="INFO"), output=out)
    logging.getLogger("retrykit.retry").info("Retry policy exhausted after 5 retries")
    assert log.level == logging.INFO
    assert "[INFO] retrykit.retry: Retry policy exhausted after 5 retries" in out.getvalue()


def test_configure_logging_json() -> None:
    out = io.StringIO()
    configure_logging(LoggingSettings(level="DEBUG", format="json"), output=out)
    logging.getLogger("retrykit.retry").debug("Retry 1 scheduled in 50000us")
    record = json.loads(out.getvalue().strip())
    assert record["level"] == "debug"
    assert record["logger"] == "retrykit.retry"
    assert record["event"] == "Retry 1 scheduled in 50000us"
    assert "timestamp" in record


def test_configure_logging_is_idempotent() -> None:
    configure_logging(LoggingSettings())
    configure_logging(LoggingSettings())
    assert len(logging.getLogger("retrykit").handlers) == 1
