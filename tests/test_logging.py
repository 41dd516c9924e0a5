"""
Tests for the logging module.

Tests verify:
- configure_logging picks the JSON or console renderer
- Bound context shows up in log events and is removed afterwards
- Statement events never carry bound values
"""

import logging
from unittest.mock import patch

import mysql.connector
import pytest
import structlog
from structlog.testing import capture_logs

from stmtkit.errors import QueryError
from stmtkit.logging import (
    LogContext,
    _add_service_metadata,
    _elasticsearch_compatible,
    bind_context,
    configure_logging,
    get_logger,
    unbind_context,
)

from tests._support.fakes import FakeResult


@pytest.fixture(autouse=True)
def reset_structlog():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class TestConfigureLogging:
    """Test logging configuration."""

    def test_json_renderer(self):
        configure_logging(level="INFO", json_format=True)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert _elasticsearch_compatible in processors

    def test_console_renderer(self):
        configure_logging(level="DEBUG", json_format=False)
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert _elasticsearch_compatible not in processors

    def test_timestamp_optional(self):
        configure_logging(json_format=True, add_timestamp=False)
        processors = structlog.get_config()["processors"]
        assert not any(isinstance(p, structlog.processors.TimeStamper) for p in processors)

    def test_service_name(self):
        configure_logging(json_format=True, service="billing")
        assert _add_service_metadata(None, "info", {})["service.name"] == "billing"

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("DB_LOG_LEVEL", "WARNING")
        with patch(
            "stmtkit.logging.structlog.make_filtering_bound_logger",
            wraps=structlog.make_filtering_bound_logger,
        ) as make_logger:
            configure_logging(json_format=True)
        make_logger.assert_called_once_with(logging.WARNING)

    def test_explicit_level_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("DB_LOG_LEVEL", "WARNING")
        with patch(
            "stmtkit.logging.structlog.make_filtering_bound_logger",
            wraps=structlog.make_filtering_bound_logger,
        ) as make_logger:
            configure_logging(level="DEBUG", json_format=True)
        make_logger.assert_called_once_with(logging.DEBUG)

    def test_get_logger_returns_bound_logger(self):
        log = get_logger("test.module")

        assert hasattr(log, "info")
        assert hasattr(log, "debug")
        assert hasattr(log, "error")


class TestProcessors:
    def test_elasticsearch_field_names(self):
        event = _elasticsearch_compatible(None, "info", {"timestamp": "t", "level": "info", "event": "x"})
        assert event == {"@timestamp": "t", "log.level": "info", "event": "x"}

    def test_service_name_not_overwritten(self):
        assert _add_service_metadata(None, "info", {"service.name": "app"})["service.name"] == "app"


class TestContext:
    def test_bind_and_unbind(self):
        bind_context(request_id="r-1", job="import")
        unbind_context("job")
        assert structlog.contextvars.get_contextvars() == {"request_id": "r-1"}

    def test_log_context_scoped(self):
        with LogContext(job="nightly_import"):
            assert structlog.contextvars.get_contextvars()["job"] == "nightly_import"
        assert "job" not in structlog.contextvars.get_contextvars()

    def test_context_merged_into_events(self):
        structlog.configure(processors=[structlog.contextvars.merge_contextvars])
        with capture_logs() as logs, LogContext(request_id="r-9"):
            get_logger("test").info("hello")
        assert logs[0]["request_id"] == "r-9"
        assert logs[0]["event"] == "hello"


class TestStatementEvents:
    def test_failure_logged_without_values(self, db, native):
        native.script(FakeResult(error=mysql.connector.errors.ProgrammingError(msg="Unknown column", errno=1054)))
        with capture_logs() as logs:
            with pytest.raises(QueryError):
                db.query("SELECT * FROM users WHERE email = :email", {"email": "ada@example.org"})

        failures = [e for e in logs if e["event"] == "statement_failed"]
        assert failures[0]["log_level"] == "error"
        assert failures[0]["query"] == "SELECT * FROM users WHERE email = :email"
        assert "ada@example.org" not in repr(failures)


class TestTransactionContext:
    def test_transaction_binds_database(self, db):
        with db.transaction():
            assert structlog.contextvars.get_contextvars()["transaction_database"] == "shop"
        assert "transaction_database" not in structlog.contextvars.get_contextvars()

    def test_transaction_context_removed_after_rollback(self, db):
        with pytest.raises(RuntimeError), db.transaction():
            raise RuntimeError("abort")
        assert "transaction_database" not in structlog.contextvars.get_contextvars()
