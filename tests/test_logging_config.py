"""Tests for logging configuration and formatters."""

import json
import logging
import sys
from datetime import datetime, timezone

import pytest

from careerscan.logging import ComponentLoggerAdapter, get_logger
from careerscan.logging.config import (
    SERVICE_NAME,
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from careerscan.logging.context import log_context


@pytest.fixture
def logger():
    """Create a test logger with handler for capturing output."""
    test_logger = logging.getLogger("test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()

    yield test_logger

    test_logger.handlers.clear()


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_basic(logger):
    """JSONFormatter produces valid JSON with mandatory fields."""
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "test"
    assert log_obj["timestamp"].endswith("Z")


def test_json_formatter_with_extra_fields(logger):
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Test message",
        (),
        None,
        extra={"event": "test.event", "count": 42, "flag": True},
    )

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "test.event"
    assert log_obj["count"] == 42
    assert log_obj["flag"] is True


def test_json_formatter_serializes_datetimes_and_objects(logger):
    when = datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)
    record = logger.makeRecord(
        "test", logging.INFO, "test.py", 1, "msg", (), None,
        extra={"when": when, "path": object()},
    )

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["when"] == "2025-11-04T12:00:00+00:00"
    assert isinstance(log_obj["path"], str)


def test_json_formatter_includes_exception(logger):
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logger.makeRecord(
            "test", logging.ERROR, "test.py", 1, "failed", (), sys.exc_info()
        )

    log_obj = json.loads(JSONFormatter().format(record))

    assert "RuntimeError: boom" in log_obj["exc_info"]


def test_contextual_filter_adds_static_fields(logger):
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)

    ContextualFilter(service="test-service", environment="test").filter(record)

    assert record.service == "test-service"
    assert record.environment == "test"


def test_contextual_filter_defaults_to_service_name(logger):
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)

    ContextualFilter().filter(record)

    assert record.service == SERVICE_NAME


def test_contextual_filter_adds_context_fields(logger):
    with log_context(run_id="abc123", source="Microsoft", keyword="react developer"):
        record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)
        ContextualFilter().filter(record)

    assert record.run_id == "abc123"
    assert record.source == "Microsoft"
    assert record.keyword == "react developer"


def test_explicit_extra_wins_over_context(logger):
    with log_context(source="Microsoft"):
        record = logger.makeRecord(
            "test", logging.INFO, "test.py", 1, "msg", (), None, extra={"source": "Amazon"}
        )
        ContextualFilter().filter(record)

    assert record.source == "Amazon"


def test_key_value_formatter_basic(logger):
    formatter = KeyValueFormatter("%(levelname)s %(name)s: %(message)s")
    record = logger.makeRecord("test", logging.INFO, "test.py", 1, "Test message", (), None)

    assert formatter.format(record) == "INFO test: Test message"


def test_key_value_formatter_with_extras(logger):
    formatter = KeyValueFormatter("%(message)s")
    record = logger.makeRecord(
        "test",
        logging.INFO,
        "test.py",
        1,
        "Pair failed",
        (),
        None,
        extra={"event": "orchestrator.pair.failed", "ok": False, "keyword": "react developer", "missing": None},
    )
    ContextualFilter().filter(record)

    output = formatter.format(record)

    assert output.startswith("Pair failed ")
    assert "event=orchestrator.pair.failed" in output
    assert "ok=false" in output
    assert 'keyword="react developer"' in output
    assert "missing=null" in output
    # Service metadata is left to the JSON output
    assert "service=" not in output


def test_configure_logging_invalid_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="LOUD")


def test_configure_logging_invalid_format():
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")


def test_configure_logging_json_format(restore_root_logger):
    configure_logging(level="DEBUG", format_type="json", environment="test")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    assert logging.getLogger("apscheduler").level == logging.WARNING


def test_configure_logging_key_value_format(restore_root_logger):
    configure_logging(level="info", format_type="key-value")

    root = logging.getLogger()
    assert root.level == logging.INFO
    assert isinstance(root.handlers[0].formatter, KeyValueFormatter)


def test_get_logger_binds_component():
    adapter = get_logger("careerscan.test", component="orchestrator")

    assert isinstance(adapter, ComponentLoggerAdapter)
    _, kwargs = adapter.process("msg", {"extra": {"event": "x"}})
    assert kwargs["extra"] == {"component": "orchestrator", "event": "x"}


def test_get_logger_without_component_returns_plain_logger():
    assert isinstance(get_logger("careerscan.test"), logging.Logger)
