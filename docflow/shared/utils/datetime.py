"""
UTC datetime utilities for consistent timezone handling.

All datetime values in docflow are timezone-aware UTC. Due dates and
report windows are computed from these helpers, never from datetime.now().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    Naive values are assumed to be UTC; aware values are converted.
    Use at repository boundaries (asyncpg may hand back naive values for
    columns declared without timezone).

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def start_of_day(dt: datetime) -> datetime:
    """Return midnight (UTC) of the day containing dt."""
    dt = ensure_utc(dt)
    return datetime(dt.year, dt.month, dt.day, tzinfo=UTC)


def start_of_month(dt: datetime) -> datetime:
    """Return the first instant (UTC) of the month containing dt."""
    dt = ensure_utc(dt)
    return datetime(dt.year, dt.month, 1, tzinfo=UTC)
