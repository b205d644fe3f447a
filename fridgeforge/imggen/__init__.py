"""Prompt building and image generation utilities."""

from .image_gen import ImageGenerationService, ImageSynthesisFailed
from .prompt_builder import DishPromptContext, PromptBuilder

__all__ = ["ImageGenerationService", "ImageSynthesisFailed", "DishPromptContext", "PromptBuilder"]
