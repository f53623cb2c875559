"""Supabase repository for meal entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from calorie_tracker.domain.entries import EntryRecord
from calorie_tracker.domain.meals import MealAnalysis
from calorie_tracker.services.coercion import coerce_calories
from calorie_tracker.services.entries import EntryRepository
from calorie_tracker.services.normalizer import to_food_item


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for meal entries."""

    client: Client

    def create_entry(self, user_id: UUID, image_url: str, meal_time: datetime) -> UUID:
        """Create an entry row with empty analysis fields and return its id."""
        response = (
            self.client.table("entries")
            .insert(
                {
                    "user_id": str(user_id),
                    "image_url": image_url,
                    "meal_time": meal_time.isoformat(),
                    "total_calories": 0,
                    "calories": 0,
                    "items": [],
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create entry")
        return UUID(response.data[0]["id"])

    def update_analysis(self, entry_id: UUID, analysis: MealAnalysis) -> None:
        """Write the normalized analysis onto the entry."""
        self.client.table("entries").update(
            {
                "meal_name": analysis.meal_name,
                "total_calories": analysis.total_calories,
                "calories": analysis.total_calories,
                "items": [item.model_dump() for item in analysis.items],
            }
        ).eq("id", str(entry_id)).execute()

    def list_recent(self, user_id: UUID, limit: int) -> list[EntryRecord]:
        """Return the user's newest entries."""
        response = (
            self.client.table("entries")
            .select(
                "id, image_url, meal_name, total_calories, calories, items, created_at"
            )
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def update_calories(self, user_id: UUID, entry_id: UUID, calories: int) -> bool:
        """Overwrite the calorie total of one of the user's entries."""
        response = (
            self.client.table("entries")
            .update({"total_calories": calories, "calories": calories})
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete one of the user's entry rows."""
        response = (
            self.client.table("entries")
            .delete()
            .eq("id", str(entry_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_entry(row: dict[str, object]) -> EntryRecord:
    total = row.get("total_calories")
    if total is None:
        total = row.get("calories")
    raw_items = row.get("items")
    return EntryRecord(
        id=UUID(str(row["id"])),
        image_url=row.get("image_url"),
        meal_name=row.get("meal_name"),
        total_calories=coerce_calories(total),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        items=[
            to_food_item(item)
            for item in (raw_items if isinstance(raw_items, list) else [])
        ],
    )

