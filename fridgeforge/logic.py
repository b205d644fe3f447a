"""High-level flow: capture, recognise, generate, illustrate, keep."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from fridgeforge.capture.base import CameraAdapter, CameraUnavailable
from fridgeforge.capture.upload import load_upload
from fridgeforge.imggen import ImageGenerationService, ImageSynthesisFailed
from fridgeforge.imgproc.normalize import ImageNormalizer, NormalizedImagePayload
from fridgeforge.models import Recipe
from fridgeforge.recipes import GenerationFailed, RecipeGenerator
from fridgeforge.recognition import IngredientRecognizer, RecognitionFailed
from fridgeforge.state.store import AppStateStore, PersistenceListener
from fridgeforge.state.views import AppView
from fridgeforge.storage.repository import LocalStateStorage

logger = logging.getLogger(__name__)

NEW_INGREDIENT_LABEL = "NEW ITEM"
RECOGNITION_ALERT = "Failed to identify ingredients. Please try again."
GENERATION_ALERT = "Failed to generate recipes."


class FridgeForgeLogic:
    """Encapsulates capture, ingredient recognition, recipe generation and illustration."""

    def __init__(
        self,
        store: AppStateStore,
        storage: LocalStateStorage,
        recognizer: IngredientRecognizer,
        generator: RecipeGenerator,
        image_service: ImageGenerationService,
        camera_factory: Callable[[], CameraAdapter],
        normalizer: ImageNormalizer | None = None,
    ) -> None:
        self._store = store
        self._storage = storage
        self._recognizer = recognizer
        self._generator = generator
        self._image_service = image_service
        self._camera_factory = camera_factory
        self._normalizer = normalizer or ImageNormalizer()
        self._camera: CameraAdapter | None = None
        self._illustrations: dict[str, asyncio.Task[None]] = {}
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def store(self) -> AppStateStore:
        return self._store

    async def start(self) -> None:
        """Load persisted records into the store and start mirroring changes."""

        persisted = await self._storage.load()
        await self._store.update(
            history=persisted.history,
            shopping_list=persisted.shopping_list,
            preferences=persisted.preferences,
        )
        self._unsubscribe = self._store.subscribe(PersistenceListener(self._storage))

    async def close(self) -> None:
        """Release the camera and abandon pending illustrations."""

        self._release_camera()
        tasks = list(self._illustrations.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._illustrations.clear()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # Navigation -----------------------------------------------------------

    async def navigate(self, view: AppView) -> None:
        if view != AppView.CAMERA:
            self._release_camera()
        await self._store.update(view=view)

    async def dismiss_alert(self) -> None:
        await self._store.update(alert=None)

    # Capture --------------------------------------------------------------

    async def open_camera(self) -> None:
        """Switch to the camera view and acquire the device."""

        self._release_camera()
        await self._store.update(captured_image=None, view=AppView.CAMERA)
        camera = self._camera_factory()
        try:
            camera.open()
        except CameraUnavailable as exc:
            logger.error("Camera failed: %s", exc)
            await self._store.update(alert=str(exc))
            raise
        self._camera = camera

    async def capture(self) -> list[str]:
        """Commit the current frame, release the camera and recognise it."""

        if self._camera is None:
            raise CameraUnavailable()
        try:
            frame = self._camera.capture_frame()
        finally:
            self._release_camera()
        payload = self._normalizer.normalize_capture(frame)
        await self._store.update(captured_image=payload)
        return await self.process_image(payload)

    async def upload(self, data: bytes) -> list[str]:
        """Normalise an uploaded file and recognise it."""

        self._release_camera()
        payload = self._normalizer.normalize_upload(load_upload(data))
        await self._store.update(captured_image=payload, view=AppView.CAMERA)
        return await self.process_image(payload)

    async def process_image(self, payload: NormalizedImagePayload) -> list[str]:
        await self._store.update(is_scanning=True)
        try:
            detected = await self._recognizer.identify(payload)
        except RecognitionFailed:
            await self._store.update(view=AppView.ONBOARDING, alert=RECOGNITION_ALERT)
            raise
        finally:
            await self._store.update(is_scanning=False)
        await self._store.update(ingredients=detected, view=AppView.INGREDIENTS)
        return detected

    def _release_camera(self) -> None:
        if self._camera is not None:
            self._camera.release()
            self._camera = None

    # Inventory ------------------------------------------------------------

    async def rename_ingredient(self, index: int, name: str) -> None:
        ingredients = list(self._store.state.ingredients)
        ingredients[index] = name
        await self._store.update(ingredients=ingredients)

    async def remove_ingredient(self, index: int) -> None:
        ingredients = list(self._store.state.ingredients)
        del ingredients[index]
        await self._store.update(ingredients=ingredients)

    async def add_ingredient(self, name: str = NEW_INGREDIENT_LABEL) -> None:
        await self._store.update(ingredients=[*self._store.state.ingredients, name])

    # Recipes --------------------------------------------------------------

    async def generate(self) -> list[Recipe]:
        """Generate recipes and start illustrating them in the background."""

        state = self._store.state
        if not state.can_generate:
            return []
        await self._store.update(is_generating=True)
        try:
            recipes = await self._generator.generate(list(state.ingredients), state.preferences)
        except GenerationFailed:
            await self._store.update(alert=GENERATION_ALERT)
            raise
        finally:
            await self._store.update(is_generating=False)

        await self._store.update(recipes=recipes, selected_recipe_id=None, view=AppView.RESULTS)
        for recipe in recipes:
            self._schedule_illustration(recipe)
        return recipes

    def _schedule_illustration(self, recipe: Recipe) -> None:
        task = asyncio.create_task(self._illustrate(recipe), name=f"illustrate-{recipe.id}")
        self._illustrations[recipe.id] = task
        task.add_done_callback(lambda _: self._illustrations.pop(recipe.id, None))

    async def _illustrate(self, recipe: Recipe) -> None:
        try:
            image_url = await self._image_service.generate(recipe)
        except ImageSynthesisFailed as exc:
            logger.warning("Failed to auto-generate image for %r: %s", recipe.title, exc)
            return
        if image_url:
            await self._store.update_recipe(recipe.id, image_url=image_url, generated_image=True)

    async def wait_for_illustrations(self) -> None:
        """Wait until every background illustration has settled."""

        tasks = list(self._illustrations.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def select_recipe(self, recipe_id: str) -> Recipe:
        """Open the detail view, rendering a photo if none exists yet."""

        recipe = self._store.state.find_recipe(recipe_id)
        if recipe is None:
            raise KeyError(recipe_id)
        await self._store.update(selected_recipe_id=recipe_id, view=AppView.RECIPE_DETAIL)
        if recipe.image_url or recipe.generated_image:
            return recipe

        await self._store.update(is_generating_image=True)
        try:
            image_url = await self._image_service.generate(recipe)
        except ImageSynthesisFailed as exc:
            logger.warning("Failed to generate image for %r: %s", recipe.title, exc)
            image_url = None
        finally:
            await self._store.update(is_generating_image=False)
        if image_url:
            await self._store.update_recipe(recipe_id, image_url=image_url, generated_image=True)
        return self._store.state.find_recipe(recipe_id) or recipe

    # History and shopping list ---------------------------------------------

    async def save_to_history(self, recipe_id: str) -> bool:
        state = self._store.state
        if any(item.id == recipe_id for item in state.history):
            return False
        recipe = state.find_recipe(recipe_id)
        if recipe is None:
            raise KeyError(recipe_id)
        await self._store.update(history=[recipe, *state.history])
        return True

    async def clear_history(self) -> None:
        await self._store.update(history=[])

    async def add_missing_to_shopping_list(self, recipe_id: str) -> list[str]:
        """Add the recipe's not-in-pantry ingredients, skipping duplicates."""

        recipe = self._store.state.find_recipe(recipe_id)
        if recipe is None:
            raise KeyError(recipe_id)
        names = [item.name for item in recipe.missing_ingredients]
        merged = list(dict.fromkeys([*self._store.state.shopping_list, *names]))
        await self._store.update(shopping_list=merged)
        return merged

    async def remove_from_shopping_list(self, item: str) -> None:
        await self._store.update(
            shopping_list=[entry for entry in self._store.state.shopping_list if entry != item],
        )

    async def update_preferences(self, **changes: Any) -> None:
        preferences = self._store.state.preferences
        updated = preferences.model_validate({**preferences.model_dump(), **changes})
        await self._store.update(preferences=updated)
