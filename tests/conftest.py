"""Shared fixtures."""

from __future__ import annotations

from io import BytesIO
from typing import Callable

import pytest
from PIL import Image

from fridgeforge.config.settings import get_settings
from fridgeforge.models import MacroNutrients, Recipe, RecipeIngredient


@pytest.fixture(autouse=True)
def _fresh_settings() -> None:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    def _make(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
        buffer = BytesIO()
        Image.new(mode, (width, height)).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_recipe() -> Callable[..., Recipe]:
    def _make(title: str = "Omelette", **overrides: object) -> Recipe:
        data = {
            "title": title,
            "description": "Fluffy and quick.",
            "prep_time": "5 min",
            "cook_time": "10 min",
            "difficulty": "Easy",
            "vibe_match_score": 90,
            "ingredients": [
                RecipeIngredient(name="Egg", quantity="3", in_pantry=True),
                RecipeIngredient(name="Chives", in_pantry=False),
            ],
            "instructions": ["Whisk the eggs.", "Cook gently."],
            "macros": MacroNutrients(calories=320, protein=21, carbs=2, fats=24),
            "tags": ["breakfast"],
        }
        data.update(overrides)
        return Recipe(**data)

    return _make
