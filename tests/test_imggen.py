"""Tests for recipe photo prompt building and generation."""

from __future__ import annotations

from typing import Callable

import pytest
import pytest_mock

from fridgeforge.api import GatewayClient, GatewayRequestError
from fridgeforge.imggen import DishPromptContext, ImageGenerationService, ImageSynthesisFailed, PromptBuilder
from fridgeforge.models import Recipe, RecipeIngredient


def test_prompt_builder_highlights_first_five_ingredients(make_recipe: Callable[..., Recipe]) -> None:
    recipe = make_recipe(
        "Garden Frittata",
        ingredients=[RecipeIngredient(name=f"Item {index}", in_pantry=True) for index in range(1, 8)],
    )

    prompt = PromptBuilder().build(DishPromptContext.from_recipe(recipe))

    assert 'of the dish: "Garden Frittata"' in prompt
    assert "Ingredients to highlight: Item 1, Item 2, Item 3, Item 4, Item 5." in prompt
    assert "Item 6" not in prompt
    assert "NO text" in prompt
    assert "Modern Editorial Food Photography" in prompt


def test_prompt_builder_appends_extra_instructions() -> None:
    prompt = PromptBuilder().build(
        DishPromptContext(title="Toast", highlights=[]),
        extra_instructions=["Square crop."],
    )

    assert "Ingredients to highlight" not in prompt
    assert prompt.endswith("Square crop.")


@pytest.mark.asyncio
async def test_generate_returns_data_url(
    mocker: pytest_mock.MockerFixture,
    make_recipe: Callable[..., Recipe],
) -> None:
    client = mocker.Mock(spec=GatewayClient)
    client.generate_image = mocker.AsyncMock(
        return_value={
            "choices": [{"message": {"images": [{"image_url": {"url": "data:image/png;base64,aW1n"}}]}}],
        },
    )

    image_url = await ImageGenerationService(client).generate(make_recipe())

    assert image_url == "data:image/png;base64,aW1n"
    assert "Omelette" in client.generate_image.await_args.args[0]


@pytest.mark.asyncio
async def test_generate_returns_none_without_image(
    mocker: pytest_mock.MockerFixture,
    make_recipe: Callable[..., Recipe],
) -> None:
    client = mocker.Mock(spec=GatewayClient)
    client.generate_image = mocker.AsyncMock(return_value={"choices": [{"message": {"content": "no"}}]})

    assert await ImageGenerationService(client).generate(make_recipe()) is None


@pytest.mark.asyncio
async def test_generate_wraps_gateway_errors(
    mocker: pytest_mock.MockerFixture,
    make_recipe: Callable[..., Recipe],
) -> None:
    client = mocker.Mock(spec=GatewayClient)
    client.generate_image = mocker.AsyncMock(side_effect=GatewayRequestError("quota"))

    with pytest.raises(ImageSynthesisFailed):
        await ImageGenerationService(client).generate(make_recipe())


@pytest.mark.asyncio
async def test_generate_wraps_malformed_payloads(
    mocker: pytest_mock.MockerFixture,
    make_recipe: Callable[..., Recipe],
) -> None:
    client = mocker.Mock(spec=GatewayClient)
    client.generate_image = mocker.AsyncMock(return_value={"choices": ["oops"]})

    with pytest.raises(ImageSynthesisFailed) as exc_info:
        await ImageGenerationService(client).generate(make_recipe())

    assert isinstance(exc_info.value.__cause__, GatewayRequestError)
