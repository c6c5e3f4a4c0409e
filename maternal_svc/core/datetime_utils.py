"""
UTC-first datetime utilities for the maternal health tracker.

This module provides consistent datetime handling across the application:
- All record timestamps are stored and processed in UTC
- ISO 8601 format with 'Z' suffix used for persistence
- Due dates are calendar dates, parsed from ISO or common day-first formats

Usage:
    from maternal_svc.core.datetime_utils import utc_now, parse_datetime, format_iso

    now = utc_now()
    dt = parse_datetime("2024-01-15T10:30:00+05:30")  # Converts to UTC
    iso_str = format_iso(dt)  # "2024-01-15T05:00:00.000Z"
"""
import logging
from datetime import date, datetime, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)


# =============================================================================
# CORE UTILITIES
# =============================================================================

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

    - If datetime is naive (no timezone), assumes it's already UTC
    - If datetime has timezone, converts to UTC

    Example:
        >>> from datetime import timedelta
        >>> ist = timezone(timedelta(hours=5, minutes=30))
        >>> to_utc(datetime(2024, 1, 15, 16, 0, tzinfo=ist)).hour
        10
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


# =============================================================================
# PARSING
# =============================================================================

_DATE_FORMATS = [
    "%Y-%m-%d",     # 2024-01-15
    "%d-%m-%Y",     # 15-01-2024
    "%d/%m/%Y",     # 15/01/2024
    "%d %b %Y",     # 15 Jan 2024
]


def parse_datetime(value: Union[str, datetime]) -> datetime:
    """
    Parse a datetime value to UTC datetime.

    Accepts a datetime object or an ISO 8601 string (with or without timezone,
    'Z' suffix allowed).

    Raises:
        ValueError: If the value cannot be parsed.

    Examples:
        >>> parse_datetime("2024-01-15T10:30:00Z")
        datetime.datetime(2024, 1, 15, 10, 30, tzinfo=datetime.timezone.utc)
    """
    if isinstance(value, datetime):
        return to_utc(value)

    if not isinstance(value, str):
        raise ValueError(f"Expected datetime or string, got {type(value).__name__}")

    value = value.strip()
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    try:
        return to_utc(datetime.fromisoformat(value))
    except ValueError:
        raise ValueError(f"Cannot parse datetime: '{value}'") from None


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Parse a calendar date such as a due date.

    Returns None for None or blank strings, so an unset due date stays unset.

    Raises:
        ValueError: If a non-blank value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value).date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected date or string, got {type(value).__name__}")

    value = value.strip()
    if not value:
        return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    # Full ISO timestamps ("2024-06-01T00:00:00Z") are accepted too
    try:
        return parse_datetime(value).date()
    except ValueError:
        raise ValueError(f"Cannot parse date: '{value}'") from None


# =============================================================================
# FORMATTING
# =============================================================================

def format_iso(dt: datetime) -> str:
    """
    Format datetime to ISO 8601 string with 'Z' suffix and millisecond precision.

    Example:
        >>> format_iso(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '2024-01-15T10:30:00.000Z'
    """
    utc_dt = to_utc(dt)
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc_dt.microsecond // 1000:03d}Z"


def format_display_date(value: Union[date, datetime]) -> str:
    """
    Format a date for human-readable display.

    Example:
        >>> format_display_date(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))
        '15 Jan 2024'
    """
    if isinstance(value, datetime):
        value = to_utc(value)
    return value.strftime("%d %b %Y")


def format_display_time(dt: datetime) -> str:
    """
    Format the time portion of a datetime as hours and minutes.

    Example:
        >>> format_display_time(datetime(2024, 1, 15, 9, 5, tzinfo=timezone.utc))
        '09:05'
    """
    return to_utc(dt).strftime("%H:%M")
