"""Logging setup for retrykit.

Drivers log through the stdlib logger ``retrykit.retry``. This module attaches
a handler to the ``retrykit`` logger using LoggingSettings: human-readable text
for development, JSON Lines (orjson) for log aggregation.

Quick Start:
    >>> from retrykit import configure_logging
    >>> configure_logging()  # RETRYKIT_LOG_LEVEL / RETRYKIT_LOG_FORMAT
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from retrykit.foundation.config import LoggingSettings, get_settings

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_HANDLER_NAME = "retrykit"


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation (Elasticsearch, Loki, Datadog, etc.)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(settings: LoggingSettings | None = None, *, output: TextIO | None = None) -> logging.Logger:
    """Configure the ``retrykit`` logger. Idempotent: replaces its own handler on repeat calls."""
    cfg = settings or get_settings().logging
    log = logging.getLogger("retrykit")
    log.setLevel(cfg.level)
    for h in [h for h in log.handlers if h.get_name() == _HANDLER_NAME]:
        log.removeHandler(h)

    handler = logging.StreamHandler(output or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    match cfg.format:
        case "json": handler.setFormatter(JsonFormatter())
        case "text": handler.setFormatter(logging.Formatter(_TEXT_FORMAT))
        case _: raise ValueError(f"Unknown format: {cfg.format}. Use 'text' or 'json'")
    log.addHandler(handler)
    return log
