"""
Calendar boundaries for the daily review cap and the leaderboard windows.

All boundaries are local midnights in the configured timezone, returned as
timezone-aware datetimes. Weeks start on Monday.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional


def _local(moment: datetime, tz: tzinfo) -> datetime:
    if moment.tzinfo is None:
        # Naive datetimes are stored as UTC
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz)


def _midnight(day: datetime, tz: tzinfo) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=tz)


def day_start(moment: datetime, tz: tzinfo) -> datetime:
    """Local midnight that starts the day containing ``moment``."""
    return _midnight(_local(moment, tz), tz)


def week_start(moment: datetime, tz: tzinfo) -> datetime:
    """Local midnight of the Monday starting the week containing ``moment``."""
    local = _local(moment, tz)
    monday = local - timedelta(days=local.weekday())
    return _midnight(monday, tz)


def month_start(moment: datetime, tz: tzinfo) -> datetime:
    """Local midnight of the first day of the month containing ``moment``."""
    local = _local(moment, tz)
    return datetime(local.year, local.month, 1, tzinfo=tz)


def to_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Normalize to aware UTC; naive values are taken to be UTC already."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
