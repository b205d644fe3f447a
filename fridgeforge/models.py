"""Domain types shared by the recognition, recipe and storage layers."""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DietType(str, Enum):
    OMNIVORE = "Omnivore"
    VEGETARIAN = "Vegetarian"
    VEGAN = "Vegan"
    KETO = "Keto"
    PALEO = "Paleo"
    GLUTEN_FREE = "Gluten Free"
    PESCATARIAN = "Pescatarian"


class VibeType(str, Enum):
    QUICK = "Quick & Easy"
    COMFORT = "Cozy Comfort"
    HEALTHY = "Clean & Lean"
    GOURMET = "Gourmet"
    BUDGET = "Budget Friendly"
    SPICY = "Spicy & Bold"


class CuisineType(str, Enum):
    ANY = "Any Cuisine"
    ITALIAN = "Italian"
    MEXICAN = "Mexican"
    ASIAN = "Asian"
    MEDITERRANEAN = "Mediterranean"
    AMERICAN = "American"
    INDIAN = "Indian"
    FRENCH = "French"
    MIDDLE_EASTERN = "Middle Eastern"


class MealType(str, Enum):
    ANY = "Any Meal"
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"
    DESSERT = "Dessert"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class _CamelModel(BaseModel):
    """Accepts both the model's camelCase keys and snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserPreferences(_CamelModel):
    """Constraints the recipe model has to respect."""

    diet: DietType = DietType.OMNIVORE
    vibe: VibeType = VibeType.QUICK
    cuisine: CuisineType = CuisineType.ANY
    meal_type: MealType = MealType.ANY
    allergies: str = ""
    user_name: str = "Chef"
    calorie_goal: int = Field(default=2000, gt=0)


class RecipeIngredient(_CamelModel):
    name: str
    quantity: str | None = None
    in_pantry: bool


class MacroNutrients(_CamelModel):
    calories: int
    protein: int
    carbs: int
    fats: int


class Recipe(_CamelModel):
    """A generated recipe; ``id`` is assigned locally, never by the model."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    description: str
    prep_time: str = ""
    cook_time: str = ""
    difficulty: Difficulty | None = None
    vibe_match_score: int
    ingredients: list[RecipeIngredient]
    instructions: list[str]
    macros: MacroNutrients
    tags: list[str] = Field(default_factory=list)
    image_url: str | None = None
    generated_image: bool = False

    @field_validator("vibe_match_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return max(0, min(100, int(round(value))))
        return value

    @property
    def missing_ingredients(self) -> list[RecipeIngredient]:
        """Ingredients the user still has to buy."""

        return [item for item in self.ingredients if not item.in_pantry]
