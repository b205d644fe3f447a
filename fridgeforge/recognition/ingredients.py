"""Ingredient recognition through the vision model."""

from __future__ import annotations

import json
import logging
from typing import Any

from fridgeforge.api.gateway_client import GatewayClient, GatewayRequestError
from fridgeforge.api.parsing import loads_with_cleanup
from fridgeforge.config.settings import Settings
from fridgeforge.imgproc.normalize import NormalizedImagePayload

logger = logging.getLogger(__name__)

INGREDIENT_PROMPT = (
    "Analyze this image. Return a JSON array of strings listing ONLY the food ingredients "
    "that are VISIBLE with 100% CERTAINTY. Do NOT guess. Do NOT list ingredients inside "
    "opaque containers. Do NOT list generic categories like 'vegetables'. Be specific "
    "(e.g., 'Red Bell Pepper'). If you are unsure about an item, DO NOT include it. "
    "I prefer fewer, accurate items over a long list of guesses. Ignore non-food items."
)


class RecognitionFailed(RuntimeError):
    """Raised when the ingredient list cannot be obtained or parsed."""


def parse_ingredient_list(text: str | None) -> list[str]:
    """Decode the model answer into a list of ingredient names.

    Anything other than a JSON array yields an empty list.
    """

    if not text or not text.strip():
        return []
    try:
        parsed: Any = loads_with_cleanup(text)
    except json.JSONDecodeError as exc:
        raise RecognitionFailed("Could not read the ingredient list returned by the model.") from exc
    if not isinstance(parsed, list):
        return []
    return [item.strip() for item in parsed if isinstance(item, str) and item.strip()]


class IngredientRecognizer:
    """Sends a normalised image to the vision model and returns ingredient names."""

    def __init__(self, client: GatewayClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def build_messages(self, payload: NormalizedImagePayload) -> list[dict[str, Any]]:
        return [
            {
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": payload.data_url}},
                    {"type": "text", "text": INGREDIENT_PROMPT},
                ],
            },
        ]

    async def identify(self, payload: NormalizedImagePayload) -> list[str]:
        """Return the ordered list of visible ingredients (possibly empty)."""

        try:
            response = await self._client.chat_completion(
                self.build_messages(payload),
                model=self._settings.vision_model,
                temperature=self._settings.vision_temperature,
            )
        except GatewayRequestError as exc:
            logger.error("Error identifying ingredients: %s", exc)
            raise RecognitionFailed("Failed to identify ingredients. Please try again.") from exc

        if not response.get("choices"):
            raise RecognitionFailed("The vision model returned no answer.")
        try:
            content = GatewayClient.first_choice_content(response)
        except GatewayRequestError as exc:
            logger.error("Unreadable vision response: %s", exc)
            raise RecognitionFailed("Failed to identify ingredients. Please try again.") from exc
        ingredients = parse_ingredient_list(content)
        logger.info("Identified %d ingredients", len(ingredients))
        return ingredients
