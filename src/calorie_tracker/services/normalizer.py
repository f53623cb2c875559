"""Normalization of raw model output into canonical meal records.

The model is asked for strict JSON but may wrap it in prose, truncate it, or
emit something else entirely. Recovery strategies are tried in order until one
yields a JSON object:

1. parse the whole text,
2. parse the span from the first ``{`` to the last ``}``,
3. scrape a bare ``"total_calories": <number>`` field,

and when none succeeds the default record is returned. Normalization never
raises.
"""

import json
import logging
import re
from collections.abc import Callable

from calorie_tracker.domain.errors import MalformedInferenceOutput
from calorie_tracker.domain.meals import (
    DEFAULT_ITEM_NAME,
    DEFAULT_MEAL_NAME,
    FoodItem,
    MealAnalysis,
)
from calorie_tracker.services.coercion import coerce_calories

MAX_ITEMS = 5
MEAL_NAME_KEYS = ("meal_name", "name", "title", "food")

_TOTAL_FIELD = re.compile(
    r"""["']?total_calories["']?\s*:\s*["']?(\d+(?:\.\d+)?)""", re.IGNORECASE
)

RecoveryStrategy = Callable[[str], dict[str, object]]

_logger = logging.getLogger(__name__)


def normalize_response(
    raw: object,
    *,
    max_items: int = MAX_ITEMS,
    override_margin: float | None = None,
) -> MealAnalysis:
    """Convert raw model output into a MealAnalysis."""
    text = raw if isinstance(raw, str) else ""
    payload = parse_payload(text)
    items = _extract_items(payload.get("items"), max_items)
    items_sum = sum(item.calories for item in items)
    total = reconcile_total(
        _reported_total(payload), items_sum, override_margin=override_margin
    )
    return MealAnalysis(
        meal_name=_extract_meal_name(payload),
        items=items,
        total_calories=total,
    )


def parse_payload(text: str) -> dict[str, object]:
    """Return the first JSON object any recovery strategy can extract."""
    for strategy in RECOVERY_STRATEGIES:
        try:
            return strategy(text)
        except MalformedInferenceOutput:  # noqa: PERF203
            continue
    _logger.warning("No recoverable JSON in model response: %.200r", text)
    return {}


def reconcile_total(
    reported: int, items_sum: int, *, override_margin: float | None = None
) -> int:
    """Choose between the model's reported total and the item sum.

    The reported total wins unless it is 0. With ``override_margin`` set, a
    reported total that differs from a positive item sum by more than that
    fraction of itself is replaced by the sum.
    """
    if reported == 0:
        return items_sum
    if override_margin is not None and override_margin > 0 and items_sum > 0:
        if abs(reported - items_sum) / reported > override_margin:
            return items_sum
    return reported


def _parse_whole(text: str) -> dict[str, object]:
    return _load_object(text)


def _parse_braced(text: str) -> dict[str, object]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise MalformedInferenceOutput("no braced object in response")
    return _load_object(text[start : end + 1])


def _scrape_total(text: str) -> dict[str, object]:
    match = _TOTAL_FIELD.search(text)
    if match is None:
        raise MalformedInferenceOutput("no total_calories field in response")
    return {"total_calories": match.group(1), "items": []}


RECOVERY_STRATEGIES: tuple[RecoveryStrategy, ...] = (
    _parse_whole,
    _parse_braced,
    _scrape_total,
)


def _load_object(text: str) -> dict[str, object]:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise MalformedInferenceOutput(str(exc)) from exc
    if not isinstance(parsed, dict):
        raise MalformedInferenceOutput("response is not a JSON object")
    return parsed


def _extract_meal_name(payload: dict[str, object]) -> str:
    for key in MEAL_NAME_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return DEFAULT_MEAL_NAME


def _extract_items(raw_items: object, limit: int) -> list[FoodItem]:
    if not isinstance(raw_items, list):
        return []
    return [to_food_item(raw) for raw in raw_items[: max(limit, 0)]]


def to_food_item(raw: object) -> FoodItem:
    """Map one raw item to a FoodItem with defaulted name and coerced calories."""
    if not isinstance(raw, dict):
        return FoodItem()
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        name = DEFAULT_ITEM_NAME
    return FoodItem(name=name.strip(), calories=coerce_calories(raw.get("calories")))


def _reported_total(payload: dict[str, object]) -> int:
    value = payload.get("total_calories")
    if value is None:
        value = payload.get("calories")
    return coerce_calories(value)
