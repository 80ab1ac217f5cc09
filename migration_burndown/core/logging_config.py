"""
Logging setup for the burndown report.

Two output styles share one root configuration:
- console lines for people running the report by hand
- one JSON object per line for scheduled jobs and log shippers

Console output goes to stderr; stdout is reserved for the report itself.
Fields passed as ``extra={...}`` (env, point_count, status, ...) become
top-level keys in JSON output.

Usage:
    from migration_burndown.core.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Normalized environment", extra={"env": "dev", "point_count": 42})
"""

import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Attributes present on every LogRecord; anything else came in through `extra`
_RESERVED_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

_LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with ``extra`` fields merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # log_with_context() nests its fields under extra_fields
        payload.update(getattr(record, "extra_fields", {}))
        payload.update(
            {
                key: value
                for key, value in record.__dict__.items()
                if key not in _RESERVED_RECORD_ATTRS and key != "extra_fields"
            }
        )
        return json.dumps(payload, default=str)


class ContextFormatter(logging.Formatter):
    """Console formatter; colors the level name when stderr is a terminal."""

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        if sys.stderr.isatty() and original in _LEVEL_COLORS:
            record.levelname = f"{_LEVEL_COLORS[original]}{original}{_RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _make_handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_output: bool = False,
) -> None:
    """
    Configure the root logger for a report run.

    Replaces any existing root handlers. Unknown level names fall back to INFO.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive)
        log_file: Optional file that receives JSON records alongside the console
        json_output: Emit JSON on the console instead of human-readable lines

    Example:
        setup_logging(level="DEBUG")
        setup_logging(level="INFO", log_file=Path(".tmp/logs/burndown.log"), json_output=True)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_formatter: logging.Formatter = (
        JSONFormatter() if json_output else ContextFormatter(fmt=_CONSOLE_FORMAT, datefmt=_CONSOLE_DATEFMT)
    )
    root_logger.addHandler(_make_handler(logging.StreamHandler(sys.stderr), log_level, console_formatter))

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(
            _make_handler(logging.FileHandler(log_file, encoding="utf-8"), log_level, JSONFormatter())
        )

    # scikit-learn/numpy warnings route through py.warnings
    logging.getLogger("py.warnings").setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``."""
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: str, message: str, **context: Any) -> None:
    """
    Log ``message`` at ``level`` with keyword context attached as structured fields.

    Example:
        log_with_context(logger, "debug", "Environment classified", env="uat", status="at_risk")
    """
    getattr(logger, level.lower())(message, extra={"extra_fields": context})
