"""Domain models for calorie targets and window totals."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class GoalConfig:
    """Partial target configuration; any field may be absent."""

    daily: float | None = None
    weekly: float | None = None
    monthly: float | None = None

    def has_any(self) -> bool:
        """Return True when at least one target is positive."""
        return any(
            value is not None and value > 0
            for value in (self.daily, self.weekly, self.monthly)
        )


@dataclass(frozen=True)
class ResolvedGoals:
    """Targets after derivation; None means no target is set."""

    daily: float | None
    weekly: float | None
    monthly: float | None


@dataclass(frozen=True)
class WindowStarts:
    """Start instants of the day, week and month windows."""

    day: datetime
    week: datetime
    month: datetime


@dataclass(frozen=True)
class WindowTotal:
    """Sum for one window with its target and progress."""

    total: int
    target: float | None
    progress: int | None
    progress_unbounded: int | None


@dataclass(frozen=True)
class WindowTotals:
    """Totals for the day, week and month windows."""

    day: WindowTotal
    week: WindowTotal
    month: WindowTotal
