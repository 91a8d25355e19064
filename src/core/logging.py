"""Structured logging: JSON/dev formatters and event emission."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

_NOISY_LOGGERS = ("uvicorn.access", "asyncio", "httpx")


class JSONFormatter(logging.Formatter):
    """Formats logs as one JSON object per line."""

    def __init__(self, environment: str = "development") -> None:
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "env": self.environment,
        }

        event = getattr(record, "event", None)
        if event is not None:
            log_data["event"] = event
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            for key, value in fields.items():
                log_data.setdefault(key, value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevFormatter(logging.Formatter):
    """Human-readable format for development."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        event = getattr(record, "event", None)
        if event is None:
            return line
        fields = getattr(record, "fields", None) or {}
        extras = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{line} [{event}] {extras}".rstrip()


def setup_logging(
    level: str = "INFO",
    json_output: bool = True,
    environment: str = "development",
) -> None:
    """Configure the root logger with a single stdout handler."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JSONFormatter(environment))
    else:
        handler.setFormatter(DevFormatter())

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def emit_event(
    logger: logging.Logger,
    event: str,
    message: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Log one structured record tagged with an event type.

    Handler failures are routed to ``Handler.handleError`` by the logging
    module, so emitting never raises into the caller.
    """
    logger.log(level, message, extra={"event": event, "fields": fields})
