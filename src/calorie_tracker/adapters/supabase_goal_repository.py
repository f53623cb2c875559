"""Supabase repository for calorie targets."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.goals import GoalConfig
from calorie_tracker.services.goals import GoalRepository


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for calorie targets."""

    client: Client

    def get_goals(self, user_id: UUID) -> GoalConfig | None:
        """Return the targets row for a user."""
        response = (
            self.client.table("goals")
            .select("daily, weekly, monthly")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return GoalConfig(
            daily=_optional_float(row.get("daily")),
            weekly=_optional_float(row.get("weekly")),
            monthly=_optional_float(row.get("monthly")),
        )

    def get_profile_daily_target(self, user_id: UUID) -> float | None:
        """Return the daily target stored on the user's profile."""
        response = (
            self.client.table("profiles")
            .select("daily_target")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _optional_float(response.data[0].get("daily_target"))

    def save_goals(self, user_id: UUID, config: GoalConfig) -> None:
        """Insert or update the user's targets row."""
        self.client.table("goals").upsert(
            {
                "user_id": str(user_id),
                "daily": config.daily,
                "weekly": config.weekly,
                "monthly": config.monthly,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()


def _optional_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, int | float | str):
        return None
    try:
        result = float(value)
    except (OverflowError, ValueError):
        return None
    return result if math.isfinite(result) else None
