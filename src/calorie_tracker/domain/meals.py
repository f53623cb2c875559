"""Models for normalized meal analysis results."""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MEAL_NAME = "meal"
DEFAULT_ITEM_NAME = "item"


class FoodItem(BaseModel):
    """Single food item identified in a meal photo."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(default=DEFAULT_ITEM_NAME, min_length=1)
    calories: int = Field(default=0, ge=0)


class MealAnalysis(BaseModel):
    """Canonical record produced from one analyzed photo.

    Names are stored without surrounding whitespace.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    meal_name: str = Field(default=DEFAULT_MEAL_NAME, min_length=1)
    items: list[FoodItem] = Field(default_factory=list)
    total_calories: int = Field(default=0, ge=0)
