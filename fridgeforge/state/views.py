"""Screens the user moves between."""

from __future__ import annotations

from enum import Enum


class AppView(str, Enum):
    """Views of the capture-to-recipe flow."""

    ONBOARDING = "onboarding"
    CAMERA = "camera"
    INGREDIENTS = "ingredients"
    RESULTS = "results"
    RECIPE_DETAIL = "recipe-detail"
    HISTORY = "history"
    SHOPPING_LIST = "shopping-list"
