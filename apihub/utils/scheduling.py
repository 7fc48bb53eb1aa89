"""Scheduling utilities for the API hub.

Helpers for timestamps and next run times of scheduled jobs.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

MIN_INTERVAL_MINUTES = 1


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Render a datetime as ISO-8601 with millisecond precision and a Z suffix."""
    if value is None:
        return None
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def clamp_interval(interval_min: int) -> int:
    """Intervals below one minute are raised to one minute."""
    return max(MIN_INTERVAL_MINUTES, int(interval_min))


def calculate_next_run_at(interval_min: int, from_time: Optional[datetime] = None) -> datetime:
    """Calculate next scheduled run time for a fixed-interval job.

    Args:
        interval_min: Interval in minutes (clamped to at least 1)
        from_time: Starting time (defaults to now)

    Returns:
        Next scheduled run time

    Example:
        >>> calculate_next_run_at(5, datetime(2025, 10, 30, 12, 0, tzinfo=timezone.utc))
        datetime.datetime(2025, 10, 30, 12, 5, tzinfo=datetime.timezone.utc)
    """
    if from_time is None:
        from_time = utc_now()
    return from_time + timedelta(minutes=clamp_interval(interval_min))
