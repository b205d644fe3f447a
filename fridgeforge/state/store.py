"""Observable application state."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Awaitable, Callable, Union

from fridgeforge.imgproc.normalize import NormalizedImagePayload
from fridgeforge.models import Recipe, UserPreferences
from fridgeforge.state.views import AppView
from fridgeforge.storage.repository import LocalStateStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AppState:
    """Immutable snapshot; every change produces a new instance."""

    view: AppView = AppView.ONBOARDING
    preferences: UserPreferences = field(default_factory=UserPreferences)
    ingredients: tuple[str, ...] = ()
    recipes: tuple[Recipe, ...] = ()
    selected_recipe_id: str | None = None
    history: tuple[Recipe, ...] = ()
    shopping_list: tuple[str, ...] = ()
    captured_image: NormalizedImagePayload | None = None
    is_scanning: bool = False
    is_generating: bool = False
    is_generating_image: bool = False
    alert: str | None = None

    @property
    def can_generate(self) -> bool:
        return len(self.ingredients) > 0

    @property
    def selected_recipe(self) -> Recipe | None:
        if self.selected_recipe_id is None:
            return None
        return self.find_recipe(self.selected_recipe_id)

    def find_recipe(self, recipe_id: str) -> Recipe | None:
        for recipe in self.recipes:
            if recipe.id == recipe_id:
                return recipe
        for recipe in self.history:
            if recipe.id == recipe_id:
                return recipe
        return None


_FIELD_NAMES = frozenset(item.name for item in fields(AppState))

Listener = Callable[[AppState, frozenset], Union[None, Awaitable[None]]]


class AppStateStore:
    """Holds the current :class:`AppState` and notifies subscribers of changes."""

    def __init__(self, initial: AppState | None = None) -> None:
        self._state = initial or AppState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def update(self, **changes: Any) -> AppState:
        """Apply ``changes`` and notify subscribers with the changed field names."""

        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise AttributeError(f"Unknown state fields: {', '.join(sorted(unknown))}")
        for key in ("ingredients", "recipes", "history", "shopping_list"):
            if key in changes:
                changes[key] = tuple(changes[key])

        changed = frozenset(key for key, value in changes.items() if getattr(self._state, key) != value)
        if not changed:
            return self._state
        self._state = replace(self._state, **changes)
        await self._notify(changed)
        return self._state

    async def update_recipe(self, recipe_id: str, **changes: Any) -> bool:
        """Keyed update of one recipe in the results and in history.

        Returns ``False`` when the recipe is in neither.
        """

        state = self._state
        updates: dict[str, list[Recipe]] = {}
        for key in ("recipes", "history"):
            recipes: tuple[Recipe, ...] = getattr(state, key)
            if any(recipe.id == recipe_id for recipe in recipes):
                updates[key] = [
                    recipe.model_copy(update=changes) if recipe.id == recipe_id else recipe
                    for recipe in recipes
                ]
        if not updates:
            logger.debug("Ignoring update for recipe %s that is no longer shown", recipe_id)
            return False
        await self.update(**updates)
        return True

    async def _notify(self, changed: frozenset) -> None:
        state = self._state
        for listener in list(self._listeners):
            try:
                result = listener(state, changed)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("State listener %r failed", listener)


class PersistenceListener:
    """Mirrors history, shopping list and preferences to local storage."""

    def __init__(self, storage: LocalStateStorage) -> None:
        self._storage = storage

    async def __call__(self, state: AppState, changed: frozenset) -> None:
        if "history" in changed:
            await self._storage.save_history(state.history)
        if "shopping_list" in changed:
            await self._storage.save_shopping_list(state.shopping_list)
        if "preferences" in changed:
            await self._storage.save_preferences(state.preferences)
