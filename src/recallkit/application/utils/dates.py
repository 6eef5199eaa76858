"""Date helpers shared by the scheduler and analytics."""

import math
from datetime import UTC, date, datetime, timedelta

from recallkit.domain.constants import SECONDS_PER_DAY


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_aware(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC so comparisons never mix the two kinds."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def add_days(dt: datetime, days: float) -> datetime:
    return dt + timedelta(days=days)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Floor of (end - start) in days; negative when end precedes start."""
    seconds = (ensure_aware(end) - ensure_aware(start)).total_seconds()
    return math.floor(seconds / SECONDS_PER_DAY)


def day_key(dt: datetime) -> date:
    """Calendar date a timestamp falls on, in its own timezone."""
    return dt.date()


def parse_iso(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return ensure_aware(value)
    return ensure_aware(datetime.fromisoformat(value))


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; schedules are rounded half-up.
    return math.floor(value + 0.5)
