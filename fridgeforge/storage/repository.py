"""Simple JSON-backed storage for history, shopping list and preferences."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from fridgeforge.models import Recipe, UserPreferences

logger = logging.getLogger(__name__)

HISTORY_KEY = "fridgeForgeHistory"
SHOPPING_KEY = "fridgeForgeShopping"
PREFS_KEY = "fridgeForgePrefs"


@dataclass(slots=True)
class PersistedState:
    """Everything read from disk at startup."""

    history: list[Recipe] = field(default_factory=list)
    shopping_list: list[str] = field(default_factory=list)
    preferences: UserPreferences = field(default_factory=UserPreferences)


class LocalStateStorage:
    """Reads and rewrites three independent JSON records under ``root``."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, asyncio.Lock] = {}

    def path_for(self, key: str) -> Path:
        return self._root / f"{key}.json"

    def _lock_for(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def _read(self, key: str) -> Any | None:
        path = self.path_for(key)
        async with self._lock_for(key):
            if not path.exists():
                return None
            raw = await asyncio.to_thread(path.read_bytes)
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError:
            # covers both UnicodeDecodeError and JSONDecodeError
            logger.warning("Stored record %s is corrupt; using defaults.", path)
            return None

    async def _write(self, key: str, payload: Any) -> None:
        body = json.dumps(payload, ensure_ascii=False, indent=2)
        async with self._lock_for(key):
            await asyncio.to_thread(self._write_file, self.path_for(key), body)

    @staticmethod
    def _write_file(path: Path, body: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")

    async def load_history(self) -> list[Recipe]:
        raw = await self._read(HISTORY_KEY)
        if not isinstance(raw, list):
            return []
        try:
            return [Recipe.model_validate(item) for item in raw]
        except ValidationError:
            logger.warning("Recipe history has an unexpected shape; starting empty.")
            return []

    async def load_shopping_list(self) -> list[str]:
        raw = await self._read(SHOPPING_KEY)
        if not isinstance(raw, list):
            return []
        return [str(item) for item in raw]

    async def load_preferences(self) -> UserPreferences:
        raw = await self._read(PREFS_KEY)
        if not isinstance(raw, dict):
            return UserPreferences()
        try:
            return UserPreferences.model_validate(raw)
        except ValidationError:
            logger.warning("Stored preferences are invalid; using defaults.")
            return UserPreferences()

    async def load(self) -> PersistedState:
        """Read all three records."""

        history, shopping_list, preferences = await asyncio.gather(
            self.load_history(),
            self.load_shopping_list(),
            self.load_preferences(),
        )
        return PersistedState(history=history, shopping_list=shopping_list, preferences=preferences)

    async def save_history(self, history: Sequence[Recipe]) -> None:
        await self._write(HISTORY_KEY, [recipe.model_dump(mode="json") for recipe in history])

    async def save_shopping_list(self, items: Sequence[str]) -> None:
        await self._write(SHOPPING_KEY, list(items))

    async def save_preferences(self, preferences: UserPreferences) -> None:
        await self._write(PREFS_KEY, preferences.model_dump(mode="json"))
