"""Day, week and month window boundaries."""

import calendar
from datetime import datetime, timedelta

from calorie_tracker.domain.goals import WindowStarts


def window_starts(now: datetime) -> WindowStarts:
    """Return the start of today, this week (Monday) and this month.

    All three are derived from the same ``now`` and keep its tzinfo, so a
    naive ``now`` gives naive local boundaries.
    """
    day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week = day - timedelta(days=day.weekday())
    month = day.replace(day=1)
    return WindowStarts(day=day, week=week, month=month)


def days_in_month(now: datetime) -> int:
    """Return the number of days in the month containing ``now``."""
    return calendar.monthrange(now.year, now.month)[1]
