"""
Structured error logging for the burndown pipeline

The engine never raises on bad input data: a malformed point, an unparseable
target or an unusable scope figure is skipped and logged with enough context
to trace it back to the raw document. These helpers keep those log records
uniform so they can be filtered by ``error_type`` and ``exception_class``.

- log_and_continue: warn and move on to the next item
- log_and_return_default: warn and substitute a fallback value
- log_and_raise: log with traceback, then propagate (I/O at the CLI edge)
"""

import logging
from typing import Any, TypeVar

T = TypeVar("T")


def _error_extra(error: Exception, context: dict[str, Any], error_type: str) -> dict[str, Any]:
    return {
        "error_type": error_type,
        "exception_class": type(error).__name__,
        "context": context,
    }


def log_and_continue(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Warn about a recoverable failure; the caller skips the item.

    Example:
        for raw_point in series["points"]:
            try:
                day, timestamp, remaining, total = _parse_raw_point(raw_point)
            except ValueError as e:
                log_and_continue(logger, e, context={"env": env, "point": raw_point}, error_type="Point parsing")
                continue
    """
    logger.warning(f"{error_type} failed: {error}", extra=_error_extra(error, context, error_type))


def log_and_return_default(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    default_value: T = None,  # type: ignore[assignment]
    error_type: str = "Operation",
) -> T:
    """
    Warn about a recoverable failure and hand back ``default_value``.

    Used where a missing value has a defined meaning downstream, e.g. an
    unparseable target date becomes None ("no target").
    """
    extra = _error_extra(error, context, error_type)
    extra["default_value"] = str(default_value)
    logger.warning(f"{error_type} failed, returning default value: {error}", extra=extra)
    return default_value


def log_and_raise(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Log an unexpected failure with its traceback and re-raise it unchanged.

    Raises:
        error, after logging
    """
    logger.error(
        f"{error_type} failed critically: {error}",
        exc_info=True,
        extra=_error_extra(error, context, error_type),
    )
    raise error
