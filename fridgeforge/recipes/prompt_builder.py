"""Prompt and schema construction for the recipe model."""

from __future__ import annotations

from typing import Any, Sequence

from fridgeforge.models import UserPreferences

STAPLES = "Staple pantry items (assume oil, salt, pepper, flour, sugar, pasta, rice)"

RECIPE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "prepTime": {"type": "string"},
        "cookTime": {"type": "string"},
        "difficulty": {"type": "string", "enum": ["Easy", "Medium", "Hard"]},
        "vibeMatchScore": {"type": "integer"},
        "ingredients": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "string"},
                    "inPantry": {"type": "boolean"},
                },
                "required": ["name", "inPantry"],
            },
        },
        "instructions": {"type": "array", "items": {"type": "string"}},
        "macros": {
            "type": "object",
            "properties": {
                "calories": {"type": "integer"},
                "protein": {"type": "integer"},
                "carbs": {"type": "integer"},
                "fats": {"type": "integer"},
            },
            "required": ["calories", "protein", "carbs", "fats"],
        },
        "tags": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["title", "description", "ingredients", "instructions", "macros", "vibeMatchScore"],
}


def response_format(count: int) -> dict[str, Any]:
    """Structured-output request wrapping ``count`` recipes in an object."""

    return {
        "type": "json_schema",
        "json_schema": {
            "name": "recipes",
            "schema": {
                "type": "object",
                "properties": {
                    "recipes": {
                        "type": "array",
                        "items": RECIPE_SCHEMA,
                        "minItems": count,
                        "maxItems": count,
                    },
                },
                "required": ["recipes"],
            },
        },
    }


class RecipePromptBuilder:
    """Builds the chef prompt from inventory and preferences."""

    def build(self, ingredients: Sequence[str], prefs: UserPreferences, *, count: int = 3) -> str:
        inventory = ", ".join(ingredients) if ingredients else STAPLES
        return "\n".join(
            [
                "Role: Michelin Star Chef & Nutritional Strategist.",
                f"Task: Create {count} unique, high-quality recipes based on the user's inventory and constraints.",
                "",
                "User Profile:",
                f"- Name: {prefs.user_name}",
                f"- Calorie Goal: {prefs.calorie_goal} calories/day "
                "(Ensure meals fit within a reasonable portion of this).",
                "",
                f"User Inventory: {inventory}.",
                "",
                "Constraints:",
                f"- Diet: {prefs.diet.value}",
                f"- Cuisine Style: {prefs.cuisine.value}",
                f"- Meal Type: {prefs.meal_type.value}",
                f"- Vibe/Goal: {prefs.vibe.value}",
                f"- Allergies/Restrictions: {prefs.allergies.strip() or 'None'}",
                "",
                "Directives:",
                "1. Prioritize using the provided inventory.",
                "2. If ingredients are missing, assume the user will buy them (mark inPantry: false).",
                "3. Ensure recipes are realistically cookable but impressive.",
                "4. 'vibeMatchScore' (0-100) should reflect how well the recipe fits the requested Vibe and Cuisine.",
                'Respond with JSON only: {"recipes": [...]}.',
            ],
        )
