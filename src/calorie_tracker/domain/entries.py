"""Domain models for stored meal entries."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from calorie_tracker.domain.meals import DEFAULT_MEAL_NAME, FoodItem


@dataclass(frozen=True)
class CalorieEntry:
    """Timestamped calorie value read back for aggregation."""

    calories: object
    created_at: datetime


@dataclass(frozen=True)
class EntryRecord:
    """Stored entry as listed on the dashboard."""

    id: UUID
    image_url: str | None
    meal_name: str | None
    total_calories: int
    created_at: datetime
    items: list[FoodItem] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        """Return the meal name, falling back to the first item name."""
        if self.meal_name and self.meal_name.strip():
            return self.meal_name.strip()
        if self.items:
            return self.items[0].name
        return DEFAULT_MEAL_NAME
