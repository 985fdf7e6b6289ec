"""
Datetime utilities.

All timestamps are stored and transmitted as UTC. SQLite returns naive
datetimes while PostgreSQL TIMESTAMPTZ returns aware ones, so anything that
does arithmetic on stored values normalizes through ensure_utc first.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Use this instead of datetime.utcnow() to ensure timezone awareness.

    Returns:
        datetime: Current time in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure datetime is UTC timezone-aware.

    Converts naive datetime (assumed to be UTC) to timezone-aware UTC.
    If datetime is already timezone-aware, converts to UTC.

    Args:
        dt: Datetime object (naive or aware) or None

    Returns:
        datetime | None: UTC timezone-aware datetime or None

    Example:
        >>> naive_dt = datetime(2025, 12, 16, 11, 30)
        >>> ensure_utc(naive_dt).tzinfo
        datetime.timezone.utc
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def seconds_between(start: datetime | None, end: datetime | None) -> float:
    """
    Elapsed seconds from start to end, or 0 when either bound is missing.

    Mixed naive/aware inputs are normalized to UTC before subtracting.

    Example:
        >>> seconds_between(datetime(2025, 1, 1, 10, 0), datetime(2025, 1, 1, 10, 1))
        60.0
    """
    if start is None or end is None:
        return 0.0
    return (ensure_utc(end) - ensure_utc(start)).total_seconds()


def to_iso_utc(dt: datetime | None) -> str | None:
    """
    Convert datetime to ISO format with 'Z' suffix (UTC indicator).

    Args:
        dt: Datetime object or None

    Returns:
        str | None: ISO 8601 string with 'Z' suffix (e.g., "2025-12-16T11:30:00.123456Z")
                   or None if input is None
    """
    if dt is None:
        return None

    return ensure_utc(dt).isoformat().replace('+00:00', 'Z')
