"""Application state and views."""

from .store import AppState, AppStateStore, PersistenceListener
from .views import AppView

__all__ = ["AppState", "AppStateStore", "AppView", "PersistenceListener"]
