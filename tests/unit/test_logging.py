"""Unit tests for structured logging."""

import json
import logging

import pytest

from keycloak_realm_provider.observability.logging import (
    CorrelationIDFilter,
    ProviderLogger,
    StructuredFormatter,
    correlation_id,
    get_correlation_id,
    set_correlation_id,
    setup_structured_logging,
)


@pytest.fixture(autouse=True)
def reset_correlation_id():
    token = correlation_id.set("")
    yield
    correlation_id.reset(token)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(message="hello", **extra):
    record = logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON formatting of log records."""

    def test_basic_fields(self):
        output = json.loads(StructuredFormatter().format(_record(correlation_id="abc")))

        assert output["message"] == "hello"
        assert output["level"] == "INFO"
        assert output["logger"] == "test"
        assert output["correlation_id"] == "abc"
        assert "timestamp" in output

    def test_structured_extras(self):
        output = json.loads(
            StructuredFormatter().format(
                _record(realm_name="demo", operation="create_start", http_status=404)
            )
        )

        assert output["realm_name"] == "demo"
        assert output["operation"] == "create_start"
        assert output["http_status"] == 404

    def test_unknown_extras_ignored(self):
        output = json.loads(StructuredFormatter().format(_record(secret="x")))
        assert "secret" not in output


class TestCorrelationIds:
    """Test correlation ID tracking."""

    def test_filter_generates_id(self):
        record = _record()

        assert CorrelationIDFilter().filter(record) is True
        assert record.correlation_id
        assert get_correlation_id() == record.correlation_id

    def test_filter_uses_current_id(self):
        set_correlation_id("fixed")
        record = _record()

        CorrelationIDFilter().filter(record)

        assert record.correlation_id == "fixed"


class TestSetupStructuredLogging:
    """Test logging configuration."""

    def test_json_handler(self, restore_root_logger):
        setup_structured_logging(log_level="DEBUG", enable_json_formatting=True)

        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_plain_handler(self, restore_root_logger):
        setup_structured_logging(
            log_level="warning", enable_json_formatting=False, correlation_id_enabled=False
        )

        root = restore_root_logger
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, StructuredFormatter)
        assert root.handlers[0].filters == []


class TestProviderLogger:
    """Test operation logging helpers."""

    def test_operation_start_sets_correlation_id(self, caplog):
        logger = ProviderLogger("test.provider")

        with caplog.at_level(logging.INFO, logger="test.provider"):
            corr_id = logger.log_operation_start("create", "demo", dry_run=True)

        assert get_correlation_id() == corr_id
        record = caplog.records[-1]
        assert record.realm_name == "demo"
        assert record.operation == "create_start"
        assert record.dry_run is True
        assert record.resource_type == "keycloak:Realm"

    def test_operation_success(self, caplog):
        logger = ProviderLogger("test.provider")

        with caplog.at_level(logging.INFO, logger="test.provider"):
            logger.log_operation_success("update", "demo", 0.5)

        record = caplog.records[-1]
        assert record.operation == "update_success"
        assert record.duration == 0.5

    def test_operation_error(self, caplog):
        logger = ProviderLogger("test.provider")

        with caplog.at_level(logging.ERROR, logger="test.provider"):
            logger.log_operation_error("delete", "demo", ValueError("boom"), 1.0)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.error_type == "ValueError"
        assert "boom" in record.getMessage()
