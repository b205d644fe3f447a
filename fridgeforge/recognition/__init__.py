"""Ingredient recognition."""

from .ingredients import IngredientRecognizer, RecognitionFailed, parse_ingredient_list

__all__ = ["IngredientRecognizer", "RecognitionFailed", "parse_ingredient_list"]
