"""
UTC-first datetime utilities for Clinic Service API.

- All timestamps produced by the service are UTC
- ISO 8601 format used for string serialization
- Calendar dates (birth dates) are stored as ISO "YYYY-MM-DD" strings

Usage:
    from core.datetime_utils import utc_now, format_iso, parse_date

    now = utc_now()
    iso_str = format_iso(now)  # "2024-01-15T05:00:00.123Z"
"""
from datetime import date, datetime, timezone
from typing import Union


def utc_now() -> datetime:
    """
    Get current datetime in UTC with timezone info.

    Returns:
        datetime: Current time as timezone-aware datetime in UTC.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime) -> str:
    """
    Format a datetime as ISO 8601 UTC with millisecond precision and 'Z' suffix.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 5, 0, tzinfo=timezone.utc))
        '2024-01-15T05:00:00.000Z'
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def to_db_date(value: date) -> str:
    """Serialize a calendar date for storage."""
    return value.isoformat()


def parse_date(value: Union[str, date]) -> date:
    """
    Parse a stored calendar date.

    Raises:
        ValueError: If the value is not an ISO "YYYY-MM-DD" date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)
