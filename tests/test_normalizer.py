"""Tests for model response normalization."""

import json

import pytest
from pydantic import ValidationError

from calorie_tracker.domain.meals import FoodItem, MealAnalysis
from calorie_tracker.services.normalizer import normalize_response, reconcile_total


def test_normalize_well_formed_response() -> None:
    raw = json.dumps(
        {
            "meal_name": "Chicken salad",
            "total_calories": 540,
            "items": [
                {"name": "chicken", "calories": 300},
                {"name": "lettuce", "calories": "40"},
                {"name": "dressing", "calories": 200.4},
            ],
        }
    )

    result = normalize_response(raw)

    assert result.meal_name == "Chicken salad"
    assert result.total_calories == 540
    assert [item.name for item in result.items] == ["chicken", "lettuce", "dressing"]
    assert [item.calories for item in result.items] == [300, 40, 200]


def test_normalize_recovers_json_wrapped_in_prose() -> None:
    raw = (
        "Sure! Here is my estimate:\n```json\n"
        '{"meal_name": "Ramen", "total_calories": 700, "items": []}\n```\n'
        "Let me know if you need anything else."
    )

    result = normalize_response(raw)

    assert result.meal_name == "Ramen"
    assert result.total_calories == 700


def test_normalize_recovers_object_inside_array() -> None:
    result = normalize_response('[{"meal_name": "Toast", "total_calories": 150}]')

    assert result.meal_name == "Toast"
    assert result.total_calories == 150


def test_normalize_scrapes_total_from_truncated_json() -> None:
    raw = (
        '{"meal_name": "Pasta", "total_calories": 650, '
        '"items": [{"name": "pasta", "calo'
    )

    result = normalize_response(raw)

    assert result == MealAnalysis(meal_name="meal", items=[], total_calories=650)


@pytest.mark.parametrize("raw", ["", "not json", "{", "}{", "[1, 2]", "null", "42"])
def test_normalize_falls_back_to_default_record(raw: str) -> None:
    result = normalize_response(raw)

    assert result == MealAnalysis(meal_name="meal", items=[], total_calories=0)


def test_normalize_non_string_input_returns_default_record() -> None:
    result = normalize_response(None)

    assert result.meal_name == "meal"
    assert result.total_calories == 0


def test_normalize_deeply_nested_input_never_raises() -> None:
    result = normalize_response("[" * 100_000)

    assert result.total_calories == 0


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"name": "Burrito"}, "Burrito"),
        ({"title": "Sushi"}, "Sushi"),
        ({"food": "Pizza"}, "Pizza"),
        ({"meal_name": "   ", "title": "Curry"}, "Curry"),
        ({"meal_name": 12, "food": "Soup"}, "Soup"),
        ({"meal_name": "  Tacos  "}, "Tacos"),
        ({}, "meal"),
    ],
)
def test_normalize_meal_name_fallbacks(payload: dict, expected: str) -> None:
    assert normalize_response(json.dumps(payload)).meal_name == expected


def test_normalize_defaults_item_fields() -> None:
    raw = json.dumps(
        {
            "total_calories": 100,
            "items": [{"calories": "abc"}, "rice", {"name": " ", "calories": -20}],
        }
    )

    result = normalize_response(raw)

    assert result.items == [FoodItem(name="item", calories=0)] * 3


def test_normalize_caps_items_and_sums_kept_items() -> None:
    items = [{"name": f"item-{index}", "calories": 100} for index in range(8)]

    result = normalize_response(json.dumps({"items": items}))

    assert len(result.items) == 5
    assert result.items[-1].name == "item-4"
    assert result.total_calories == 500


def test_normalize_uses_item_sum_when_total_is_zero() -> None:
    raw = json.dumps(
        {
            "total_calories": 0,
            "items": [{"name": "a", "calories": 90}, {"name": "b", "calories": 230}],
        }
    )

    assert normalize_response(raw).total_calories == 320


def test_normalize_prefers_reported_total_over_item_sum() -> None:
    raw = json.dumps(
        {
            "total_calories": 310,
            "items": [{"name": "a", "calories": 90}, {"name": "b", "calories": 230}],
        }
    )

    assert normalize_response(raw).total_calories == 310


def test_normalize_reads_legacy_calories_field() -> None:
    raw = json.dumps({"meal_name": "Apple", "calories": "95 kcal"})

    assert normalize_response(raw).total_calories == 95


def test_normalize_is_idempotent_on_its_own_output() -> None:
    analysis = MealAnalysis(
        meal_name="Oatmeal breakfast",
        items=[
            FoodItem(name="oatmeal", calories=230),
            FoodItem(name="banana", calories=90),
        ],
        total_calories=320,
    )

    assert normalize_response(analysis.model_dump_json()) == analysis


def test_normalize_round_trips_directly_built_records() -> None:
    analysis = MealAnalysis(
        meal_name=" Soup ",
        items=[FoodItem(name=" bread ", calories=90)],
        total_calories=90,
    )

    assert analysis.meal_name == "Soup"
    assert analysis.items[0].name == "bread"
    assert normalize_response(analysis.model_dump_json()) == analysis


def test_meal_models_reject_blank_names() -> None:
    with pytest.raises(ValidationError):
        MealAnalysis(meal_name="   ")
    with pytest.raises(ValidationError):
        FoodItem(name="  ", calories=10)


def test_normalize_applies_override_margin_when_configured() -> None:
    raw = json.dumps(
        {
            "total_calories": 1000,
            "items": [{"name": "a", "calories": 90}, {"name": "b", "calories": 230}],
        }
    )

    assert normalize_response(raw).total_calories == 1000
    assert normalize_response(raw, override_margin=0.5).total_calories == 320


@pytest.mark.parametrize(
    ("reported", "items_sum", "margin", "expected"),
    [
        (0, 0, None, 0),
        (0, 320, None, 320),
        (310, 320, None, 310),
        (310, 0, None, 310),
        (310, 320, 0.1, 310),
        (1000, 320, 0.5, 320),
        (1000, 0, 0.5, 1000),
        (1000, 320, 0, 1000),
    ],
)
def test_reconcile_total(
    reported: int, items_sum: int, margin: float | None, expected: int
) -> None:
    assert reconcile_total(reported, items_sum, override_margin=margin) == expected
