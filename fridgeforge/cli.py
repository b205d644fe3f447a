"""Command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import base64
from pathlib import Path
from typing import Sequence

from fridgeforge.api import GatewayClient
from fridgeforge.capture import CameraUnavailable
from fridgeforge.capture.camera import CV2Camera
from fridgeforge.config.settings import Settings, get_settings
from fridgeforge.imggen import ImageGenerationService
from fridgeforge.imgproc import InvalidImage
from fridgeforge.integrations import run_all_checks
from fridgeforge.logic import FridgeForgeLogic
from fridgeforge.models import CuisineType, DietType, MealType, Recipe, VibeType
from fridgeforge.monitoring.logging import configure_logging
from fridgeforge.recipes import GenerationFailed, RecipeGenerator
from fridgeforge.recognition import IngredientRecognizer, RecognitionFailed
from fridgeforge.state import AppStateStore
from fridgeforge.storage import LocalStateStorage


def build_logic(settings: Settings, client: GatewayClient) -> FridgeForgeLogic:
    """Wire the default dependencies together."""

    return FridgeForgeLogic(
        store=AppStateStore(),
        storage=LocalStateStorage(Path(settings.state_root)),
        recognizer=IngredientRecognizer(client, settings),
        generator=RecipeGenerator(client, settings),
        image_service=ImageGenerationService(client),
        camera_factory=lambda: CV2Camera(settings.camera_index),
    )


def _format_recipe(index: int, recipe: Recipe) -> str:
    lines = [
        f"{index}. {recipe.title} ({recipe.vibe_match_score}% match)",
        f"   {recipe.description}",
    ]
    timing = " / ".join(part for part in [recipe.prep_time, recipe.cook_time] if part)
    if timing or recipe.difficulty:
        difficulty = recipe.difficulty.value if recipe.difficulty else ""
        lines.append(f"   {timing} {difficulty}".rstrip())
    macros = recipe.macros
    lines.append(
        f"   {macros.calories} kcal, P {macros.protein}g, C {macros.carbs}g, F {macros.fats}g",
    )
    missing = [item.name for item in recipe.missing_ingredients]
    if missing:
        lines.append(f"   To buy: {', '.join(missing)}")
    return "\n".join(lines)


def _write_image(directory: Path, recipe: Recipe) -> Path | None:
    if not recipe.image_url or not recipe.image_url.startswith("data:"):
        return None
    prefix, _, data = recipe.image_url.partition(",")
    extension = prefix.split("/", 1)[-1].split(";", 1)[0] or "png"
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{recipe.id}.{extension}"
    path.write_bytes(base64.b64decode(data))
    return path


async def _scan(logic: FridgeForgeLogic, args: argparse.Namespace) -> int:
    if args.camera:
        await logic.open_camera()
        await logic.capture()
    else:
        await logic.upload(Path(args.image).read_bytes())

    for name in args.add or []:
        await logic.add_ingredient(name)
    ingredients = list(logic.store.state.ingredients)
    print("Ingredients:", ", ".join(ingredients) if ingredients else "(none detected)")
    if not args.generate:
        return 0
    if not logic.store.state.can_generate:
        print("Add at least one ingredient before generating recipes.")
        return 1

    recipes = await logic.generate()
    await logic.wait_for_illustrations()
    for index, recipe in enumerate(recipes, start=1):
        recipe = logic.store.state.find_recipe(recipe.id) or recipe
        print(_format_recipe(index, recipe))
        if args.images_dir:
            path = _write_image(Path(args.images_dir), recipe)
            if path:
                print(f"   Photo: {path}")
        if args.save:
            await logic.save_to_history(recipe.id)
        if args.shop:
            await logic.add_missing_to_shopping_list(recipe.id)
    return 0


async def _prefs(logic: FridgeForgeLogic, args: argparse.Namespace) -> int:
    changes = {
        key: value
        for key, value in {
            "diet": args.diet,
            "vibe": args.vibe,
            "cuisine": args.cuisine,
            "meal_type": args.meal,
            "allergies": args.allergies,
            "user_name": args.name,
            "calorie_goal": args.calories,
        }.items()
        if value is not None
    }
    if changes:
        await logic.update_preferences(**changes)
    prefs = logic.store.state.preferences
    print(f"Name: {prefs.user_name}")
    print(f"Calorie goal: {prefs.calorie_goal} kcal")
    print(f"Diet: {prefs.diet.value}")
    print(f"Vibe: {prefs.vibe.value}")
    print(f"Cuisine: {prefs.cuisine.value}")
    print(f"Meal: {prefs.meal_type.value}")
    print(f"Allergies: {prefs.allergies or 'None'}")
    return 0


async def _history(logic: FridgeForgeLogic, args: argparse.Namespace) -> int:
    if args.clear:
        await logic.clear_history()
        print("Recipe history cleared.")
        return 0
    history = logic.store.state.history
    if not history:
        print("No saved recipes yet.")
    for index, recipe in enumerate(history, start=1):
        print(_format_recipe(index, recipe))
    return 0


async def _shopping(logic: FridgeForgeLogic, args: argparse.Namespace) -> int:
    for item in args.remove or []:
        await logic.remove_from_shopping_list(item)
    items = logic.store.state.shopping_list
    if not items:
        print("Shopping list is empty.")
    for item in items:
        print(f"- {item}")
    return 0


_COMMANDS = {
    "scan": _scan,
    "prefs": _prefs,
    "history": _history,
    "shopping": _shopping,
}


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    if args.command == "check":
        results = await run_all_checks()
        for result in results:
            status = "✅" if result.success else "❌"
            print(f"{status} {result.name}: {result.message}")
        return 0 if all(result.success for result in results) else 1

    if args.command == "scan" and not settings.aitunnel_api_key:
        print("AITUNNEL_API_KEY is not configured.")
        return 1

    client = GatewayClient(settings)
    logic = build_logic(settings, client)
    try:
        await logic.start()
        try:
            return await _COMMANDS[args.command](logic, args)
        except (CameraUnavailable, InvalidImage, RecognitionFailed, GenerationFailed, OSError) as exc:
            print(logic.store.state.alert or str(exc))
            return 1
    finally:
        await logic.close()
        await client.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fridgeforge", description="Turn a photo of your fridge into recipes.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL for this run.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    scan = commands.add_parser("scan", help="Recognise ingredients and optionally generate recipes.")
    source = scan.add_mutually_exclusive_group(required=True)
    source.add_argument("--image", help="Path to a photo to upload.")
    source.add_argument("--camera", action="store_true", help="Capture a frame from the webcam.")
    scan.add_argument("--add", action="append", metavar="INGREDIENT", help="Add an ingredient by hand.")
    scan.add_argument("--generate", action="store_true", help="Generate recipes from the inventory.")
    scan.add_argument("--images-dir", help="Directory for the generated recipe photos.")
    scan.add_argument("--save", action="store_true", help="Save generated recipes to history.")
    scan.add_argument("--shop", action="store_true", help="Add missing ingredients to the shopping list.")

    prefs = commands.add_parser("prefs", help="Show or change dietary preferences.")
    prefs.add_argument("--diet", choices=[item.value for item in DietType])
    prefs.add_argument("--vibe", choices=[item.value for item in VibeType])
    prefs.add_argument("--cuisine", choices=[item.value for item in CuisineType])
    prefs.add_argument("--meal", choices=[item.value for item in MealType])
    prefs.add_argument("--allergies")
    prefs.add_argument("--name")
    prefs.add_argument("--calories", type=int)

    history = commands.add_parser("history", help="List saved recipes.")
    history.add_argument("--clear", action="store_true")

    shopping = commands.add_parser("shopping", help="Show the shopping list.")
    shopping.add_argument("--remove", action="append", metavar="ITEM")

    commands.add_parser("check", help="Check connectivity to the model gateway.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return asyncio.run(_run(args))
