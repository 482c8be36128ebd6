# prefs/__init__.py

from .prefs_models import PreferencesDecodeError, SortOrder, SortOrderDecodeError, UserPreferences
from .prefs_repository import UserPreferencesRepository
from .prefs_store import PreferencesIOError, SqlitePreferencesStore

__all__ = [
    "PreferencesDecodeError",
    "PreferencesIOError",
    "SortOrder",
    "SortOrderDecodeError",
    "SqlitePreferencesStore",
    "UserPreferences",
    "UserPreferencesRepository",
]
