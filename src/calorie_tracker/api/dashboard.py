"""Dashboard endpoints for entries, totals and targets."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from calorie_tracker.api.models import (
    CreateEntryRequest,
    GoalsRequest,
    UpdateCaloriesRequest,
)
from calorie_tracker.domain.errors import EntryNotFound
from calorie_tracker.domain.goals import GoalConfig

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer
    from calorie_tracker.domain.entries import EntryRecord

router = APIRouter(prefix="/api", tags=["dashboard"])


def current_user_id(x_user_id: UUID = Header()) -> UUID:
    """Return the caller's user id from the X-User-Id header."""
    return x_user_id


@router.post("/entries")
async def create_entry(
    payload: CreateEntryRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Register an uploaded photo as a new entry."""
    container: AppContainer = request.app.state.container
    entry_id = container.entry_service.create_entry(user_id, payload.image_url)
    return {"ok": True, "entry_id": str(entry_id)}


@router.get("/entries/recent")
async def recent_entries(
    request: Request,
    user_id: UUID = Depends(current_user_id),
    limit: int = Query(default=10, ge=1, le=50),
) -> dict[str, object]:
    """Return the user's most recent entries."""
    container: AppContainer = request.app.state.container
    entries = container.entry_service.list_recent(user_id, limit)
    return {"entries": [_serialize_entry(entry) for entry in entries]}


@router.patch("/entries/{entry_id}")
async def update_entry_calories(
    entry_id: UUID,
    payload: UpdateCaloriesRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Apply a manual calorie edit to one of the caller's entries."""
    container: AppContainer = request.app.state.container
    try:
        calories = container.entry_service.update_calories(
            user_id, entry_id, payload.calories
        )
    except EntryNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
    return {"ok": True, "calories": calories}


@router.delete("/entries/{entry_id}")
async def delete_entry(
    entry_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Delete one of the caller's entries."""
    container: AppContainer = request.app.state.container
    try:
        container.entry_service.delete_entry(user_id, entry_id)
    except EntryNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc
    return {"ok": True}


@router.get("/totals")
async def totals(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return day, week and month totals; null progress means no target."""
    container: AppContainer = request.app.state.container
    return asdict(container.stats_service.get_totals(user_id))


@router.get("/goals")
async def get_goals(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return configured and resolved targets."""
    container: AppContainer = request.app.state.container
    config = container.goal_service.get_config(user_id)
    resolved = container.goal_service.get_goals(
        user_id, _now(container.settings.timezone)
    )
    return {"configured": asdict(config), "resolved": asdict(resolved)}


@router.put("/goals")
async def put_goals(
    payload: GoalsRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Store the user's targets."""
    container: AppContainer = request.app.state.container
    config = GoalConfig(
        daily=payload.daily, weekly=payload.weekly, monthly=payload.monthly
    )
    container.goal_service.set_goals(user_id, config)
    return {"ok": True, "configured": asdict(config)}


def _serialize_entry(entry: EntryRecord) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "image_url": entry.image_url,
        "meal_name": entry.display_name,
        "total_calories": entry.total_calories,
        "items": [item.model_dump() for item in entry.items],
        "created_at": entry.created_at.isoformat(),
    }


def _now(timezone_name: str) -> datetime:
    return datetime.now(tz=ZoneInfo(timezone_name))
