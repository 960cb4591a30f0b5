"""Tests for centralized logging configuration."""

import datetime as dt
import json
import logging
import os
from decimal import Decimal
from unittest.mock import patch

import pytest

from finance_client.config.logging_config import (
    JSONFormatter,
    LoggingConfig,
    configure_logging,
    reset_logging,
)
from finance_client.utils.logging_utils import LogContext


def _flush_root_handlers():
    for handler in logging.getLogger().handlers:
        handler.flush()


class TestLoggingConfig:
    """Test LoggingConfig class."""

    def test_default_configuration(self):
        """Test default logging configuration."""
        config = LoggingConfig()

        assert config.log_level == "INFO"
        assert config.log_format == "standard"
        assert config.log_file is None
        assert config.enable_console is True
        assert config.enable_file is False
        assert config.quiet_http is True

    def test_environment_variable_override(self):
        """Test configuration from environment variables."""
        with patch.dict(
            os.environ,
            {
                "LOG_LEVEL": "DEBUG",
                "LOG_FORMAT": "json",
                "LOG_FILE": "/tmp/finance-client.log",
                "LOG_BACKUP_COUNT": "3",
                "LOG_QUIET_HTTP": "false",
            },
        ):
            config = LoggingConfig.from_env()

        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert config.log_file == "/tmp/finance-client.log"
        assert config.backup_count == 3
        assert config.quiet_http is False

    def test_log_file_enables_file_output(self):
        """Test that setting LOG_FILE turns file output on by default."""
        with patch.dict(os.environ, {"LOG_FILE": "/tmp/finance-client.log"}):
            config = LoggingConfig.from_env()

        assert config.enable_file is True

    def test_default_level_used_without_env(self):
        """Test that the caller's default level applies when LOG_LEVEL is unset."""
        with patch.dict(os.environ, {}, clear=True):
            config = LoggingConfig.from_env(default_level="WARNING")

        assert config.log_level == "WARNING"
        assert config.enable_file is False

    def test_invalid_log_level(self):
        """Test invalid log level raises error."""
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingConfig(log_level="INVALID")

    def test_invalid_log_format(self):
        """Test invalid log format raises error."""
        with pytest.raises(ValueError, match="Invalid log format"):
            LoggingConfig(log_format="xml")

    def test_file_logging_enabled_without_path(self):
        """Test file logging enabled without file path raises error."""
        with pytest.raises(ValueError, match="log_file must be specified"):
            LoggingConfig(enable_file=True, log_file=None)


class TestConfigureLogging:
    """Test configure_logging function."""

    def teardown_method(self):
        """Reset logging after each test."""
        reset_logging()

    def test_console_handler_configuration(self):
        """Test console handler is configured correctly."""
        configure_logging(LoggingConfig(log_level="DEBUG", enable_console=True))

        root_logger = logging.getLogger()
        stream_handlers = [
            h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)
        ]
        assert len(stream_handlers) == 1
        assert root_logger.level == logging.DEBUG

    def test_http_loggers_are_quieted(self):
        """Test that urllib3 connection chatter is raised to WARNING."""
        configure_logging(LoggingConfig(log_level="DEBUG"))

        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_file_handler_writes_utf8(self, tmp_path):
        """Test file handler is configured correctly."""
        log_file = tmp_path / "logs" / "client.log"
        configure_logging(
            LoggingConfig(
                log_level="INFO",
                enable_console=False,
                enable_file=True,
                log_file=str(log_file),
            )
        )

        logging.getLogger("test_module").info("Rechnung für Müller gespeichert")
        _flush_root_handlers()

        assert "Rechnung für Müller gespeichert" in log_file.read_text(encoding="utf-8")

    def test_json_format_includes_context_fields(self, tmp_path):
        """Test that JSON output carries LogContext and extra fields."""
        log_file = tmp_path / "client.log"
        configure_logging(
            LoggingConfig(
                log_level="INFO",
                log_format="json",
                enable_console=False,
                enable_file=True,
                log_file=str(log_file),
            )
        )

        with LogContext(method="GET", endpoint="/finanzen/rechnungen"):
            logging.getLogger("test_module").info(
                "Fetched invoices", extra={"total": Decimal("12.50")}
            )
        _flush_root_handlers()

        log_entry = json.loads(log_file.read_text(encoding="utf-8").strip())
        assert log_entry["level"] == "INFO"
        assert log_entry["logger"] == "test_module"
        assert log_entry["message"] == "Fetched invoices"
        assert log_entry["method"] == "GET"
        assert log_entry["endpoint"] == "/finanzen/rechnungen"
        assert log_entry["total"] == "12.50"

    def test_reconfiguration_replaces_handlers(self):
        """Test reconfiguration replaces handlers."""
        configure_logging(LoggingConfig(log_level="INFO"))
        root_logger = logging.getLogger()
        initial_handler_count = len(root_logger.handlers)

        configure_logging(LoggingConfig(log_level="DEBUG"))

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == initial_handler_count


class TestJSONFormatter:
    """Test JSONFormatter directly."""

    def test_non_serializable_values_are_stringified(self):
        record = logging.LogRecord(
            "test", logging.INFO, __file__, 1, "msg", None, None
        )
        record.due_date = dt.date(2024, 12, 31)

        output = json.loads(JSONFormatter().format(record))

        assert output["due_date"] == "2024-12-31"


class TestResetLogging:
    """Test reset_logging function."""

    def test_reset_removes_handlers_and_restores_level(self):
        """Test reset_logging removes all handlers."""
        configure_logging(LoggingConfig(log_level="DEBUG"))

        reset_logging()

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 0
        assert root_logger.level == logging.WARNING
