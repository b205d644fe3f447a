"""Recipe photo generation service."""

from __future__ import annotations

import logging

from fridgeforge.api.gateway_client import GatewayClient, GatewayRequestError
from fridgeforge.models import Recipe

from .prompt_builder import DishPromptContext, PromptBuilder

logger = logging.getLogger(__name__)


class ImageSynthesisFailed(RuntimeError):
    """Raised when the image model call fails."""


class ImageGenerationService:
    """Coordinates prompt submission and extraction of the generated photo."""

    def __init__(self, client: GatewayClient) -> None:
        self._client = client
        self._prompt_builder = PromptBuilder()

    async def generate(self, recipe: Recipe) -> str | None:
        """
        Render a photo of ``recipe``.

        Returns a ``data:`` URL (or the remote URL the gateway handed back),
        or ``None`` when the model produced no image.
        """

        prompt = self._prompt_builder.build(DishPromptContext.from_recipe(recipe))
        try:
            result = await self._client.generate_image(prompt)
            image_url = GatewayClient.first_image_url(result)
        except GatewayRequestError as exc:
            raise ImageSynthesisFailed(f"Image generation failed for {recipe.title!r}.") from exc

        if not image_url:
            logger.warning("Image model returned no picture for %r", recipe.title)
            return None
        return image_url
