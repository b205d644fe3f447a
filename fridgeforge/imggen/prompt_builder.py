"""Prompt construction helpers for the recipe photo step."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from fridgeforge.models import Recipe

HIGHLIGHT_LIMIT = 5

STYLE_DIRECTIVE = (
    "Visual Style: Modern Editorial Food Photography.\n"
    "Lighting: Cinematic chiaroscuro lighting, soft window light coming from the left, deep shadows.\n"
    "Resolution: 8k, hyper-detailed texture.\n"
    "Composition: 45-degree angle or top-down.\n"
    "Details: Steam rising, visible moisture/glaze on food, fresh herbs garnishing.\n"
    "Plating: Elegant but rustic ceramic dishware, dark textured background (slate or wood)."
)


@dataclass(slots=True)
class DishPromptContext:
    """Structured information used to build the visual prompt."""

    title: str
    highlights: list[str]

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> DishPromptContext:
        return cls(
            title=recipe.title,
            highlights=[item.name for item in recipe.ingredients[:HIGHLIGHT_LIMIT]],
        )


class PromptBuilder:
    """Builds textual prompts for the image model."""

    def build(self, context: DishPromptContext, *, extra_instructions: Iterable[str] | None = None) -> str:
        """Return a natural-language instruction for photographing the dish."""

        highlights = ", ".join(context.highlights)
        extras = " ".join(extra_instructions or [])
        return "\n\n".join(
            part
            for part in [
                f'Create an award-winning, highly realistic food photography shot of the dish: "{context.title}".',
                STYLE_DIRECTIVE,
                f"Ingredients to highlight: {highlights}." if highlights else "",
                "Strictly NO text, NO labels, NO graphics. Pure photorealism only.",
                extras,
            ]
            if part
        ).strip()
