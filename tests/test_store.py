"""Tests for the observable state store."""

from __future__ import annotations

from typing import Callable

import pytest
import pytest_mock

from fridgeforge.models import Recipe, UserPreferences, VibeType
from fridgeforge.state import AppState, AppStateStore, AppView, PersistenceListener
from fridgeforge.storage import LocalStateStorage


@pytest.mark.asyncio
async def test_update_notifies_changed_fields() -> None:
    store = AppStateStore()
    seen: list[tuple[AppState, frozenset]] = []
    store.subscribe(lambda state, changed: seen.append((state, changed)))

    await store.update(view=AppView.CAMERA, ingredients=["Egg"], is_scanning=False)

    assert len(seen) == 1
    state, changed = seen[0]
    assert changed == {"view", "ingredients"}
    assert state.ingredients == ("Egg",)
    assert store.state is state


@pytest.mark.asyncio
async def test_update_without_changes_is_silent() -> None:
    store = AppStateStore()
    calls: list[frozenset] = []
    store.subscribe(lambda state, changed: calls.append(changed))

    await store.update(view=AppView.ONBOARDING)

    assert calls == []


@pytest.mark.asyncio
async def test_async_listeners_are_awaited_and_unsubscribe_works() -> None:
    store = AppStateStore()
    calls: list[frozenset] = []

    async def listener(state: AppState, changed: frozenset) -> None:
        calls.append(changed)

    unsubscribe = store.subscribe(listener)
    await store.update(alert="hello")
    unsubscribe()
    await store.update(alert=None)

    assert calls == [frozenset({"alert"})]


@pytest.mark.asyncio
async def test_failing_listener_does_not_block_others() -> None:
    store = AppStateStore()
    calls: list[str] = []

    def broken(state: AppState, changed: frozenset) -> None:
        raise RuntimeError("listener bug")

    store.subscribe(broken)
    store.subscribe(lambda state, changed: calls.append("ok"))

    await store.update(alert="x")

    assert calls == ["ok"]


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields() -> None:
    with pytest.raises(AttributeError):
        await AppStateStore().update(colour="blue")


@pytest.mark.asyncio
async def test_update_recipe_is_keyed(make_recipe: Callable[..., Recipe]) -> None:
    first, second = make_recipe("First"), make_recipe("Second")
    store = AppStateStore(AppState(recipes=(first, second)))

    applied = await store.update_recipe(second.id, image_url="data:image/png;base64,eA==", generated_image=True)
    missing = await store.update_recipe("gone", image_url="x")

    assert applied
    assert not missing
    assert store.state.recipes[0].image_url is None
    assert store.state.recipes[1].image_url == "data:image/png;base64,eA=="
    assert store.state.recipes[1].generated_image


def test_can_generate_requires_ingredients() -> None:
    assert not AppState().can_generate
    assert AppState(ingredients=("Egg",)).can_generate


def test_selected_recipe_looks_in_history(make_recipe: Callable[..., Recipe]) -> None:
    saved = make_recipe("Saved")
    state = AppState(history=(saved,), selected_recipe_id=saved.id)

    assert state.selected_recipe == saved
    assert AppState().selected_recipe is None


@pytest.mark.asyncio
async def test_persistence_listener_writes_only_changed_records(mocker: pytest_mock.MockerFixture) -> None:
    storage = mocker.Mock(spec=LocalStateStorage)
    storage.save_history = mocker.AsyncMock()
    storage.save_shopping_list = mocker.AsyncMock()
    storage.save_preferences = mocker.AsyncMock()
    store = AppStateStore()
    store.subscribe(PersistenceListener(storage))

    await store.update(shopping_list=["Milk"], view=AppView.SHOPPING_LIST)
    await store.update(preferences=UserPreferences(vibe=VibeType.GOURMET))

    storage.save_shopping_list.assert_awaited_once_with(("Milk",))
    storage.save_preferences.assert_awaited_once()
    storage.save_history.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_recipe_reaches_saved_history(make_recipe: Callable[..., Recipe]) -> None:
    shown, saved = make_recipe("Shown"), make_recipe("Saved")
    store = AppStateStore(AppState(recipes=(shown,), history=(saved, shown)))

    assert await store.update_recipe(saved.id, image_url="data:image/png;base64,eA==")
    assert await store.update_recipe(shown.id, generated_image=True)

    assert store.state.history[0].image_url == "data:image/png;base64,eA=="
    assert store.state.recipes[0].generated_image
    assert store.state.history[1].generated_image
