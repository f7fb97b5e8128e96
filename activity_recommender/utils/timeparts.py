"""
Time helpers: time-of-day windows and seasons used by the profiler and scorers.

Naive datetimes are treated as UTC.
"""

from datetime import datetime, timezone

from ..taxonomy import Season, TimeOfDay


def ensure_aware(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes so aware/naive values compare safely."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def time_of_day(dt: datetime) -> TimeOfDay:
    """Bucket the hour of dt: before 6 night, before 12 morning, before 18 afternoon, else evening."""
    hour = dt.hour
    if hour < 6:
        return TimeOfDay.NIGHT
    if hour < 12:
        return TimeOfDay.MORNING
    if hour < 18:
        return TimeOfDay.AFTERNOON
    return TimeOfDay.EVENING


def season_for(dt: datetime) -> Season:
    """Meteorological season (northern hemisphere) for the month of dt."""
    month = dt.month
    if 3 <= month <= 5:
        return Season.SPRING
    if 6 <= month <= 8:
        return Season.SUMMER
    if 9 <= month <= 11:
        return Season.FALL
    return Season.WINTER


def days_between(earlier: datetime, later: datetime) -> float:
    """Fractional days from earlier to later (negative if earlier is in the future)."""
    delta = ensure_aware(later) - ensure_aware(earlier)
    return delta.total_seconds() / 86400.0
