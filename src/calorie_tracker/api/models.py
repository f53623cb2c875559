"""Pydantic models for HTTP request payloads."""

from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class AnalyzeRequest(BaseModel):
    """Request to analyze an uploaded meal photo."""

    image_url: str = Field(
        min_length=1, validation_alias=AliasChoices("image_url", "imageUrl")
    )
    entry_id: UUID | None = Field(
        default=None, validation_alias=AliasChoices("entry_id", "entryId")
    )


class CreateEntryRequest(BaseModel):
    """Request to register an uploaded photo as a new entry."""

    image_url: str = Field(
        min_length=1, validation_alias=AliasChoices("image_url", "imageUrl")
    )


class UpdateCaloriesRequest(BaseModel):
    """Manual calorie correction for an entry."""

    calories: int | float | str


class GoalsRequest(BaseModel):
    """Calorie targets; omitted fields are derived from the daily one."""

    daily: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    weekly: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    monthly: float | None = Field(default=None, ge=0, allow_inf_nan=False)
