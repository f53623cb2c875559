"""Calorie target resolution."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.goals import GoalConfig, ResolvedGoals
from calorie_tracker.services.windows import days_in_month

DAYS_IN_WEEK = 7

GoalLookup = Callable[[UUID], GoalConfig | None]


class GoalRepository(Protocol):
    """Persistence interface for calorie targets."""

    def get_goals(self, user_id: UUID) -> GoalConfig | None:
        """Return the user's configured targets, if any."""

    def get_profile_daily_target(self, user_id: UUID) -> float | None:
        """Return the legacy daily target stored on the profile."""

    def save_goals(self, user_id: UUID, config: GoalConfig) -> None:
        """Persist the user's targets."""


def resolve_goals(config: GoalConfig | None, now: datetime) -> ResolvedGoals:
    """Fill in weekly and monthly targets from the daily one.

    Explicit values are never overwritten. Without a daily target the missing
    fields stay None, meaning no target is set.
    """
    config = config or GoalConfig()
    weekly = config.weekly
    monthly = config.monthly
    if config.daily is not None:
        if weekly is None:
            weekly = config.daily * DAYS_IN_WEEK
        if monthly is None:
            monthly = config.daily * days_in_month(now)
    return ResolvedGoals(daily=config.daily, weekly=weekly, monthly=monthly)


@dataclass
class GoalService:
    """Service that loads and stores user calorie targets."""

    repository: GoalRepository

    def get_config(self, user_id: UUID) -> GoalConfig:
        """Return targets from the first source that has a positive value."""
        for lookup in self._lookups():
            config = lookup(user_id)
            if config is not None and config.has_any():
                return config
        return GoalConfig()

    def get_goals(self, user_id: UUID, now: datetime) -> ResolvedGoals:
        """Return resolved targets for the user as of ``now``."""
        return resolve_goals(self.get_config(user_id), now)

    def set_goals(self, user_id: UUID, config: GoalConfig) -> None:
        """Persist a user's targets."""
        self.repository.save_goals(user_id, config)

    def _lookups(self) -> tuple[GoalLookup, ...]:
        return (self.repository.get_goals, self._profile_goals)

    def _profile_goals(self, user_id: UUID) -> GoalConfig | None:
        daily = self.repository.get_profile_daily_target(user_id)
        if daily is None:
            return None
        return GoalConfig(daily=daily)
