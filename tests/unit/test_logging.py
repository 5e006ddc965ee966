"""Unit tests for logging helpers."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from row_cursor.core.logging import JsonFormatter, configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_logger() -> Iterator[None]:
    """Undo configure_logging() so later tests still see records via caplog."""
    logger = logging.getLogger("row_cursor")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "row_cursor.core.cursor", logging.INFO, __file__, 1, "opened %s", ("users",), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_basic_fields(self) -> None:
        payload = json.loads(JsonFormatter().format(_record()))
        assert payload == {
            "level": "INFO",
            "logger": "row_cursor.core.cursor",
            "message": "opened users",
        }

    def test_extra_fields_promoted(self) -> None:
        payload = json.loads(JsonFormatter().format(_record(sql="SELECT 1", rows=3)))
        assert payload["sql"] == "SELECT 1"
        assert payload["rows"] == 3

    def test_unserializable_values_stringified(self) -> None:
        payload = json.loads(JsonFormatter().format(_record(page=object())))
        assert payload["page"].startswith("<object object")


class TestConfigureLogging:
    def test_console_handler_attached(self) -> None:
        configure_logging(level="DEBUG")
        logger = logging.getLogger("row_cursor")
        assert logger.level == logging.DEBUG
        assert not logger.propagate
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JsonFormatter)

    def test_json_handler(self) -> None:
        configure_logging(level="WARNING", json_logs=True)
        (handler,) = logging.getLogger("row_cursor").handlers
        assert isinstance(handler.formatter, JsonFormatter)
        assert handler.level == logging.WARNING

    def test_module_loggers_are_children(self) -> None:
        assert get_logger("row_cursor.core.cursor").parent is logging.getLogger("row_cursor")
