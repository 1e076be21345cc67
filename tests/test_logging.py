"""Tests for JSON log formatting and logging setup."""

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from apitoken.logging import JSONLogFormatter, configure_logging
from apitoken.settings import get_settings


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("apitoken.service", logging.WARNING, __file__, 1, "Rejected token: %s", ("bad",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_format_basic_fields() -> None:
    entry = json.loads(JSONLogFormatter(service="auth").format(_record()))
    assert entry["level"] == "WARNING"
    assert entry["service"] == "auth"
    assert entry["logger"] == "apitoken.service"
    assert entry["message"] == "Rejected token: bad"
    assert "timestamp" in entry
    assert "token_error" not in entry


def test_format_includes_token_error() -> None:
    entry = json.loads(JSONLogFormatter().format(_record(token_error="integrity_mismatch")))
    assert entry["token_error"] == "integrity_mismatch"
    assert entry["service"] == "apitoken"


def test_format_includes_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = _record()
        record.exc_info = sys.exc_info()
    entry = json.loads(JSONLogFormatter().format(record))
    assert "RuntimeError: boom" in entry["exception"]


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_installs_json_handler() -> None:
    logging.getLogger().addHandler(logging.NullHandler())
    configure_logging(service="auth", level="DEBUG")
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONLogFormatter)


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_defaults_to_setting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    try:
        configure_logging()
    finally:
        get_settings.cache_clear()
    assert logging.getLogger().level == logging.WARNING
