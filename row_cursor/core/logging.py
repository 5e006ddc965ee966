"""Logging helpers.

Modules log through ``get_logger(__name__)``; nothing is configured on
import. Applications that want row-cursor's output formatted can call
``configure_logging`` once at startup.

Usage:
    from row_cursor.core.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", json_logs=True)
    log = get_logger(__name__)
    log.info("message", extra={"rows": 1000})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any

# Attributes every LogRecord carries; anything else arrived through extra=
_RESERVED = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as a JSON string, promoting ``extra`` fields."""
    payload: dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    for key, value in record.__dict__.items():
        if key not in _RESERVED:
            payload[key] = value
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    logger_name: str = "row_cursor",
) -> None:
    """Attach a stream handler to the ``row_cursor`` logger.

    Args:
        level: Logging level name (e.g. "DEBUG", "INFO", "WARNING").
        json_logs: Emit JSON lines instead of the console format.
        logger_name: Logger to configure; ``""`` configures the root logger.
    """
    formatter_name = "json" if json_logs else "console"
    logger_config = {"handlers": ["default"], "level": level, "propagate": False}

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JsonFormatter,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": formatter_name,
                "level": level,
            }
        },
    }
    if logger_name:
        config["loggers"] = {logger_name: logger_config}
    else:
        config["root"] = {"handlers": ["default"], "level": level}
    logging.config.dictConfig(config)


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger with the given name. If name is None, returns the root logger."""
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter"]
