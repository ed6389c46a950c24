"""Unit tests for logging configuration module.

Tests verify that the logging configuration functions work correctly with different
scenarios including various log levels, formats, file logging options and the
structured service context.
"""

import logging
from unittest.mock import patch

import pytest

from sumikapp.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    ContextFilter,
    get_logger,
    log_context,
    setup_logging,
)


def _console_handler() -> logging.Handler:
    root_logger = logging.getLogger()
    return next(h for h in root_logger.handlers if isinstance(h, logging.StreamHandler))


class TestSetupLoggingLogLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_setup_logging_with_different_levels(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)
        assert _console_handler().level == expected_level

    def test_module_levels_are_applied(self):
        setup_logging(enable_file=False)
        for module_name, level in MODULE_LOG_LEVELS.items():
            assert logging.getLogger(module_name).level == logging.getLevelName(level)


class TestSetupLoggingFormats:
    @pytest.mark.parametrize(
        "log_format,expected",
        [("simple", SIMPLE_FORMAT), ("detailed", DETAILED_FORMAT), ("json", JSON_FORMAT), ("unknown", DETAILED_FORMAT)],
    )
    def test_formats(self, log_format, expected):
        setup_logging(log_format=log_format, enable_file=False)
        assert _console_handler().formatter._fmt == expected

    def test_file_logging_writes_to_log_dir(self, tmp_path):
        with patch("sumikapp.core.logging_config.ENABLE_FILE_LOGGING", True), patch(
            "sumikapp.core.logging_config.LOG_FILE_DIR", str(tmp_path)
        ):
            setup_logging(enable_file=True)
        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert (tmp_path / "sumikapp.log").exists()
        setup_logging(enable_file=False)

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging(enable_file=False)
        setup_logging(enable_file=False)
        assert len(logging.getLogger().handlers) == 1


class TestContext:
    def test_log_context_drops_none_values(self):
        assert log_context("weekly_report.approve", user_id="u1", report_id=None) == {
            "name": "weekly_report.approve",
            "user_id": "u1",
        }

    def test_context_filter_renders_ctx(self):
        record = logging.LogRecord("sumikapp", logging.INFO, __file__, 1, "hello", None, None)
        record.ctx = {"name": "section.create", "title": "BSIT-4A"}
        assert ContextFilter().filter(record)
        assert record.ctx_suffix == " [name=section.create title=BSIT-4A]"
        assert record.ctx_json == '{"name": "section.create", "title": "BSIT-4A"}'

    def test_context_filter_without_ctx(self):
        record = logging.LogRecord("sumikapp", logging.INFO, __file__, 1, "hello", None, None)
        ContextFilter().filter(record)
        assert record.ctx_suffix == ""
        assert record.ctx_json == "{}"

    def test_formatted_line_includes_context(self):
        setup_logging(log_format="simple", enable_file=False)
        handler = _console_handler()
        record = logging.LogRecord("sumikapp.test", logging.INFO, __file__, 1, "Creating section...", None, None)
        record.ctx = {"name": "section.create"}
        handler.filter(record)
        assert handler.format(record) == "INFO - sumikapp.test - Creating section... [name=section.create]"

    def test_get_logger_returns_named_logger(self):
        assert get_logger("sumikapp.server.services.sections").name == "sumikapp.server.services.sections"
