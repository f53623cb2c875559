"""Supabase repository for calorie statistics."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.entries import CalorieEntry
from calorie_tracker.services.stats import StatsRepository


@dataclass
class SupabaseStatsRepository(StatsRepository):
    """Supabase implementation for stats queries."""

    client: Client

    def list_entries(self, user_id: UUID, start: datetime) -> list[CalorieEntry]:
        """Return entries created since ``start``."""
        response = (
            self.client.table("entries")
            .select("calories, total_calories, created_at")
            .eq("user_id", str(user_id))
            .gte("created_at", start.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_row(row: dict[str, object]) -> CalorieEntry:
    created_at_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_at_raw)
        if isinstance(created_at_raw, str) and created_at_raw
        else datetime.min
    )
    calories = row.get("calories")
    if calories is None:
        calories = row.get("total_calories")
    return CalorieEntry(calories=calories, created_at=created_at)
