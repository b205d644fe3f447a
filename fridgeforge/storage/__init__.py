"""Local persistence."""

from .repository import LocalStateStorage, PersistedState

__all__ = ["LocalStateStorage", "PersistedState"]
