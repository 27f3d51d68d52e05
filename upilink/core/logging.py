"""Structured logging setup using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Scanned codes can carry account details; only their size is logged.
_REDACTED_KEYS = ("payload", "raw", "original_payload", "deeplink")


def _redact_payloads(_logger: Any, _method: str, event_dict: dict) -> dict:
    for key in _REDACTED_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = f"<{len(value)} chars>"
    return event_dict


def setup_logging(log_level: str = "INFO", json_logs: bool = True) -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, stream=sys.stdout, format="%(message)s")

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        _redact_payloads,
        structlog.processors.format_exc_info,
    ]
    processors.append(structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)
