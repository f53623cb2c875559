"""Meal entry management."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.entries import EntryRecord
from calorie_tracker.domain.errors import EntryNotFound
from calorie_tracker.domain.meals import MealAnalysis
from calorie_tracker.services.coercion import coerce_calories


class EntryRepository(Protocol):
    """Persistence interface for meal entries."""

    def create_entry(self, user_id: UUID, image_url: str, meal_time: datetime) -> UUID:
        """Create a placeholder entry and return its id."""

    def update_analysis(self, entry_id: UUID, analysis: MealAnalysis) -> None:
        """Store the normalized analysis on an entry."""

    def list_recent(self, user_id: UUID, limit: int) -> list[EntryRecord]:
        """Return the user's most recent entries, newest first."""

    def update_calories(self, user_id: UUID, entry_id: UUID, calories: int) -> bool:
        """Overwrite the calorie total of a user's entry; False when none matched."""

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> bool:
        """Delete a user's entry row; False when none matched."""


@dataclass
class EntryService:
    """Service for creating, listing and editing entries."""

    repository: EntryRepository

    def create_entry(self, user_id: UUID, image_url: str) -> UUID:
        """Create an entry for an uploaded photo ahead of analysis."""
        return self.repository.create_entry(
            user_id, image_url, meal_time=datetime.now(tz=UTC)
        )

    def list_recent(self, user_id: UUID, limit: int = 10) -> list[EntryRecord]:
        """Return recent entries."""
        return self.repository.list_recent(user_id, limit)

    def update_calories(self, user_id: UUID, entry_id: UUID, calories: object) -> int:
        """Apply a manual calorie edit and return the stored value.

        Raises EntryNotFound when the entry does not belong to the user.
        """
        value = coerce_calories(calories)
        if not self.repository.update_calories(user_id, entry_id, value):
            raise EntryNotFound(str(entry_id))
        return value

    def delete_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete one of the user's entries."""
        if not self.repository.delete_entry(user_id, entry_id):
            raise EntryNotFound(str(entry_id))
