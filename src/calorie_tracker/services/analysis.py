"""Meal photo analysis through a vision-capable language model."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from calorie_tracker.domain.errors import InferenceUnavailable, PersistenceFailed
from calorie_tracker.domain.meals import MealAnalysis
from calorie_tracker.services.entries import EntryRepository
from calorie_tracker.services.normalizer import MAX_ITEMS, normalize_response

SYSTEM_PROMPT = (
    "You are a nutrition assistant. Estimate the calories of the meal in the photo. "
    "Return ONLY valid JSON with no surrounding text, in exactly this shape: "
    '{"meal_name": string, "total_calories": number, '
    '"items": [{"name": string, "calories": number}]}. '
    "Calories are whole kcal numbers. List at most 5 items."
)
USER_PROMPT = "Estimate the total calories of this meal."

_logger = logging.getLogger(__name__)


class InferenceClient(Protocol):
    """Interface for the vision language model."""

    async def complete(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        image_url: str,
    ) -> str:
        """Return the model's raw text answer.

        Raises InferenceUnavailable when no answer could be obtained.
        """


class ImageFetcher(Protocol):
    """Interface for downloading uploaded photos."""

    async def fetch(self, url: str) -> bytes:
        """Return the image bytes, raising InferenceUnavailable on failure."""


@dataclass
class AnalysisService:
    """Service that estimates a meal from a photo and stores the result."""

    client: InferenceClient
    image_fetcher: ImageFetcher
    entry_repository: EntryRepository
    model: str
    temperature: float = 0.2
    max_items: int = MAX_ITEMS
    override_margin: float | None = None

    async def analyze(
        self, image_ref: str, entry_id: UUID | None = None
    ) -> MealAnalysis:
        """Analyze a photo and, when ``entry_id`` is given, save the result.

        Raises InferenceUnavailable when the model could not be reached and
        PersistenceFailed, carrying the analysis, when the save failed.
        """
        image_url = await self._resolve_image(image_ref)
        raw = await self.client.complete(
            model=self.model,
            temperature=self.temperature,
            system_prompt=SYSTEM_PROMPT,
            user_prompt=USER_PROMPT,
            image_url=image_url,
        )
        analysis = normalize_response(
            raw, max_items=self.max_items, override_margin=self.override_margin
        )
        _logger.info(
            "Meal analysis: meal=%s items=%s total=%s",
            analysis.meal_name,
            len(analysis.items),
            analysis.total_calories,
        )
        if entry_id is not None:
            try:
                self.entry_repository.update_analysis(entry_id, analysis)
            except Exception as exc:
                raise PersistenceFailed(entry_id, analysis) from exc
        return analysis

    async def _resolve_image(self, image_ref: str) -> str:
        if image_ref.startswith("data:"):
            return image_ref
        if image_ref.startswith(("http://", "https://")):
            image_bytes = await self.image_fetcher.fetch(image_ref)
            if not image_bytes:
                raise InferenceUnavailable("Downloaded image is empty")
            return _to_data_url(image_bytes)
        raise ValueError("Image reference must be a data URL or an http(s) URL")


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
