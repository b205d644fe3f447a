"""Recipe generation."""

from .generator import GenerationFailed, RecipeGenerator
from .prompt_builder import RecipePromptBuilder

__all__ = ["GenerationFailed", "RecipeGenerator", "RecipePromptBuilder"]
