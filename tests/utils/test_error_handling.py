#!/usr/bin/env python3
"""
Tests for Error Handling Utility Module

Tests all three core utilities:
1. log_and_continue() - Continue execution after logging
2. log_and_return_default() - Return default value after logging
3. log_and_raise() - Log and re-raise exception
"""

import logging
from unittest.mock import MagicMock

import pytest

from migration_burndown.utils.error_handling import log_and_continue, log_and_raise, log_and_return_default


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing log calls."""
    return MagicMock(spec=logging.Logger)


class TestLogAndContinue:
    """Test suite for log_and_continue() function."""

    def test_logs_at_warning_level(self, mock_logger):
        """Test that log_and_continue logs at WARNING level."""
        error = ValueError("bad date")

        log_and_continue(mock_logger, error, {"env": "dev"}, "Point parsing")

        mock_logger.warning.assert_called_once()
        message = mock_logger.warning.call_args[0][0]
        assert "Point parsing failed" in message
        assert "bad date" in message

    def test_includes_structured_context(self, mock_logger):
        """Test that structured context is included in log extra."""
        context = {"env": "dev", "series": "spa.actual", "point": {"x": "bad"}}

        log_and_continue(mock_logger, ValueError("bad"), context, "Point parsing")

        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["context"] == context
        assert extra["error_type"] == "Point parsing"
        assert extra["exception_class"] == "ValueError"

    def test_returns_none(self, mock_logger):
        assert log_and_continue(mock_logger, ValueError("x"), {}) is None

    def test_default_error_type(self, mock_logger):
        log_and_continue(mock_logger, KeyError("missing"), {})

        assert "Operation failed" in mock_logger.warning.call_args[0][0]


class TestLogAndReturnDefault:
    """Test suite for log_and_return_default() function."""

    def test_returns_default_value(self, mock_logger):
        result = log_and_return_default(mock_logger, ValueError("x"), {}, default_value=[], error_type="Parse")

        assert result == []

    def test_returns_none_by_default(self, mock_logger):
        assert log_and_return_default(mock_logger, ValueError("x"), {}) is None

    def test_logs_default_value(self, mock_logger):
        log_and_return_default(mock_logger, ValueError("x"), {"target": "soon"}, default_value=0, error_type="Target")

        mock_logger.warning.assert_called_once()
        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["default_value"] == "0"
        assert extra["context"] == {"target": "soon"}
        assert "returning default value" in mock_logger.warning.call_args[0][0]


class TestLogAndRaise:
    """Test suite for log_and_raise() function."""

    def test_reraises_original_exception(self, mock_logger):
        error = OSError("disk full")

        with pytest.raises(OSError, match="disk full") as exc_info:
            log_and_raise(mock_logger, error, {"output": "report.json"}, "Report save")

        assert exc_info.value is error

    def test_logs_at_error_level_with_traceback(self, mock_logger):
        with pytest.raises(TypeError):
            log_and_raise(mock_logger, TypeError("not serializable"), {"output": "x"}, "Report save")

        mock_logger.error.assert_called_once()
        call_args = mock_logger.error.call_args
        assert "Report save failed critically" in call_args[0][0]
        assert call_args[1]["exc_info"] is True
        assert call_args[1]["extra"]["exception_class"] == "TypeError"
