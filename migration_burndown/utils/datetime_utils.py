#!/usr/bin/env python3
"""
Datetime Utility Functions

Centralized conversions between ISO-8601 strings, datetimes and the epoch
millisecond timestamps the burndown engine orders and charts points by.

All conversions are UTC-based: a calendar date maps to midnight UTC, and
naive datetimes are treated as UTC.
"""

from datetime import UTC, date, datetime

MS_PER_SECOND = 1000


def parse_iso_timestamp(timestamp_str: str | None) -> datetime | None:
    """
    Parse an ISO 8601 date or timestamp (with or without 'Z' suffix).

    Handles:
    - "2026-02-10" (date only, midnight UTC)
    - "2026-02-10T10:00:00Z" (UTC with Z)
    - "2026-02-10T10:00:00+01:00" (explicit offset)
    - "2026-02-10T10:00:00" (naive, treated as UTC)

    Args:
        timestamp_str: ISO 8601 string, or None

    Returns:
        Timezone-aware datetime in UTC, or None if input is empty

    Raises:
        ValueError: If the value is not a string or cannot be parsed

    Examples:
        >>> parse_iso_timestamp("2026-02-10")
        datetime.datetime(2026, 2, 10, 0, 0, tzinfo=datetime.timezone.utc)
    """
    if not timestamp_str:
        return None

    if not isinstance(timestamp_str, str):
        raise ValueError(f"Timestamp must be a string, got {type(timestamp_str)}")

    value = timestamp_str.strip()
    try:
        if len(value) == 10:
            return datetime.combine(date.fromisoformat(value), datetime.min.time(), tzinfo=UTC)
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid ISO timestamp format: {timestamp_str}") from e

    return to_utc(parsed)


def to_utc(moment: datetime) -> datetime:
    """Return ``moment`` as an aware UTC datetime (naive values are assumed UTC)."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def datetime_to_epoch_ms(moment: datetime) -> int:
    """
    Convert a datetime to epoch milliseconds.

    Examples:
        >>> datetime_to_epoch_ms(datetime(1970, 1, 2, tzinfo=UTC))
        86400000
    """
    utc_moment = to_utc(moment)
    delta = utc_moment - datetime(1970, 1, 1, tzinfo=UTC)
    return (delta.days * 86400 + delta.seconds) * MS_PER_SECOND + delta.microseconds // 1000


def date_to_epoch_ms(value: str) -> int:
    """
    Convert an ISO date (or timestamp) string to epoch milliseconds.

    Raises:
        ValueError: If the value is empty or cannot be parsed
    """
    parsed = parse_iso_timestamp(value)
    if parsed is None:
        raise ValueError("Date value is empty")
    return datetime_to_epoch_ms(parsed)


def epoch_ms_to_datetime(timestamp: float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp / MS_PER_SECOND, tz=UTC)


def epoch_ms_to_date(timestamp: float) -> str:
    """
    Convert epoch milliseconds to an ISO calendar date string (UTC).

    Examples:
        >>> epoch_ms_to_date(86400000)
        '1970-01-02'
    """
    return epoch_ms_to_datetime(timestamp).date().isoformat()
