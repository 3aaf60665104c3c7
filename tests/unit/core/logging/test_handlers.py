"""
Tests for log handlers.

Tests create_console_handler and create_file_handler.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from http_fluent.core.logging.filters import ExtraFieldsFilter
from http_fluent.core.logging.formatters import TextFormatter
from http_fluent.core.logging.handlers import create_console_handler, create_file_handler


class TestCreateConsoleHandler:
    """Tests for create_console_handler function."""

    def test_creates_stream_handler(self):
        formatter = TextFormatter()
        handler = create_console_handler(logging.DEBUG, formatter)

        assert isinstance(handler, logging.StreamHandler)
        assert handler.level == logging.DEBUG
        assert handler.formatter is formatter

    def test_handler_writes_to_stderr(self):
        handler = create_console_handler(logging.INFO, TextFormatter())
        assert handler.stream is sys.stderr

    def test_handler_with_filters(self):
        filters = [ExtraFieldsFilter({"service": "test"}), ExtraFieldsFilter({"env": "dev"})]
        handler = create_console_handler(logging.INFO, TextFormatter(), filters=filters)

        assert handler.filters == filters


class TestCreateFileHandler:
    """Tests for create_file_handler function."""

    def test_creates_rotating_handler(self, tmp_path):
        log_file = tmp_path / "app.log"
        handler = create_file_handler(
            str(log_file),
            logging.INFO,
            TextFormatter(),
            max_bytes=1024,
            backup_count=3,
        )

        try:
            assert isinstance(handler, RotatingFileHandler)
            assert handler.maxBytes == 1024
            assert handler.backupCount == 3
            assert handler.level == logging.INFO
        finally:
            handler.close()

    def test_creates_parent_directory(self, tmp_path):
        log_file = tmp_path / "nested" / "dir" / "app.log"
        handler = create_file_handler(str(log_file), logging.INFO, TextFormatter())

        try:
            assert log_file.parent.is_dir()
        finally:
            handler.close()

    def test_writes_records(self, tmp_path):
        log_file = tmp_path / "app.log"
        handler = create_file_handler(str(log_file), logging.INFO, TextFormatter())

        logger = logging.getLogger("http_fluent.test_handlers")
        logger.propagate = False
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)
        try:
            logger.info("written to file")
        finally:
            logger.removeHandler(handler)
            handler.close()

        assert "written to file" in log_file.read_text(encoding="utf-8")
