"""Calorie totals over day, week and month windows."""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_tracker.domain.entries import CalorieEntry
from calorie_tracker.domain.goals import ResolvedGoals, WindowTotal, WindowTotals
from calorie_tracker.services.coercion import coerce_calories
from calorie_tracker.services.goals import GoalService
from calorie_tracker.services.windows import window_starts

MAX_PROGRESS = 100


class StatsRepository(Protocol):
    """Persistence interface for calorie entries."""

    def list_entries(self, user_id: UUID, start: datetime) -> list[CalorieEntry]:
        """Return entries created at or after ``start``."""


@dataclass
class StatsService:
    """Service for computing a user's window totals."""

    repository: StatsRepository
    goal_service: GoalService
    timezone_name: str = "UTC"

    def get_totals(self, user_id: UUID, now: datetime | None = None) -> WindowTotals:
        """Return day, week and month totals against the user's targets."""
        current = now or datetime.now(tz=ZoneInfo(self.timezone_name))
        starts = window_starts(current)
        since = min(starts.week, starts.month)
        entries = self.repository.list_entries(user_id, since.astimezone(UTC))
        goals = self.goal_service.get_goals(user_id, current)
        return aggregate_totals(entries, goals, current)


def aggregate_totals(
    entries: Iterable[CalorieEntry], goals: ResolvedGoals, now: datetime
) -> WindowTotals:
    """Sum entries into the windows containing ``now``.

    An entry belongs to a window when ``created_at >= window start``.
    """
    starts = window_starts(now)
    day = week = month = 0
    for entry in entries:
        created_at = _align(entry.created_at, now)
        calories = coerce_calories(entry.calories)
        if created_at >= starts.month:
            month += calories
        if created_at >= starts.week:
            week += calories
        if created_at >= starts.day:
            day += calories
    return WindowTotals(
        day=_window_total(day, goals.daily),
        week=_window_total(week, goals.weekly),
        month=_window_total(month, goals.monthly),
    )


def _window_total(total: int, target: float | None) -> WindowTotal:
    if target is not None and not math.isfinite(target):
        target = None
    if target is None or target <= 0:
        return WindowTotal(
            total=total, target=target, progress=None, progress_unbounded=None
        )
    unbounded = max(0, math.floor(total / target * 100 + 0.5))
    return WindowTotal(
        total=total,
        target=target,
        progress=min(unbounded, MAX_PROGRESS),
        progress_unbounded=unbounded,
    )


def _align(created_at: datetime, now: datetime) -> datetime:
    """Make ``created_at`` comparable with ``now``.

    Naive storage timestamps are UTC. A naive ``now`` means local time.
    """
    if now.tzinfo is not None and created_at.tzinfo is None:
        return created_at.replace(tzinfo=UTC)
    if now.tzinfo is None and created_at.tzinfo is not None:
        return created_at.astimezone().replace(tzinfo=None)
    return created_at
