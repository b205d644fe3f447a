"""Recipe generation through the chat model."""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Sequence

from pydantic import ValidationError

from fridgeforge.api.gateway_client import GatewayClient, GatewayRequestError
from fridgeforge.api.parsing import loads_with_cleanup
from fridgeforge.config.settings import Settings
from fridgeforge.models import Recipe, UserPreferences
from fridgeforge.recipes.prompt_builder import RecipePromptBuilder, response_format

logger = logging.getLogger(__name__)


class GenerationFailed(RuntimeError):
    """Raised when the recipe step fails."""


class RecipeGenerator:
    """Turns an inventory and preferences into validated recipes."""

    def __init__(self, client: GatewayClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings
        self._prompt_builder = RecipePromptBuilder()

    async def generate(self, ingredients: Sequence[str], prefs: UserPreferences) -> list[Recipe]:
        count = self._settings.recipe_count
        prompt = self._prompt_builder.build(ingredients, prefs, count=count)
        try:
            response = await self._client.chat_completion(
                [{"role": "user", "content": prompt}],
                model=self._settings.recipe_model,
                temperature=self._settings.recipe_temperature,
                response_format=response_format(count),
            )
        except GatewayRequestError as exc:
            logger.error("Error generating recipes: %s", exc)
            raise GenerationFailed("Failed to generate recipes.") from exc

        try:
            content = GatewayClient.first_choice_content(response)
        except GatewayRequestError as exc:
            logger.error("Unreadable recipe response: %s", exc)
            raise GenerationFailed("Failed to generate recipes.") from exc
        if not content:
            raise GenerationFailed("The recipe model returned no answer.")
        return self.parse(content)

    @staticmethod
    def parse(content: str) -> list[Recipe]:
        """Validate the model output and give every recipe a fresh id."""

        try:
            parsed: Any = loads_with_cleanup(content)
        except json.JSONDecodeError as exc:
            raise GenerationFailed("Could not read the recipes returned by the model.") from exc

        if isinstance(parsed, dict):
            parsed = parsed.get("recipes")
        if not isinstance(parsed, list):
            raise GenerationFailed("The recipe model returned an unexpected format.")

        recipes: list[Recipe] = []
        for item in parsed:
            if not isinstance(item, dict):
                raise GenerationFailed("The recipe model returned an unexpected format.")
            payload = {key: value for key, value in item.items() if key not in {"id", "imageUrl", "generatedImage"}}
            try:
                recipes.append(Recipe.model_validate({**payload, "id": str(uuid.uuid4())}))
            except ValidationError as exc:
                logger.error("Invalid recipe payload: %s", item)
                raise GenerationFailed("The recipe model returned an incomplete recipe.") from exc
        return recipes
