"""Errors surfaced by the analysis pipeline."""

from uuid import UUID

from calorie_tracker.domain.meals import MealAnalysis


class MalformedInferenceOutput(ValueError):
    """Unparseable model output.

    Never raised out of the normalizer, which recovers into a default record.
    """


class InferenceUnavailable(RuntimeError):
    """The inference service could not produce a response."""


class PersistenceFailed(RuntimeError):
    """The analysis was computed but could not be saved."""

    def __init__(self, entry_id: UUID, analysis: MealAnalysis) -> None:
        super().__init__(f"Failed to save analysis for entry {entry_id}")
        self.entry_id = entry_id
        self.analysis = analysis


class EntryNotFound(LookupError):
    """No entry with the given id belongs to the user."""
