"""Service layer for clapboard."""

from .favorites import FavoritesService
from .picker import LauncherPicker, Picker
from .selection_service import SelectionService
from .store_service import StoreOutcome, StoreService

__all__ = [
    "FavoritesService",
    "LauncherPicker",
    "Picker",
    "SelectionService",
    "StoreOutcome",
    "StoreService",
]
