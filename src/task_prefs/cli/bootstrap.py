# src/task_prefs/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the stores, the preference repository and the view model into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..prefs.prefs_repository import UserPreferencesRepository
from ..prefs.prefs_store import SqlitePreferencesStore
from ..tasks.task_store import TaskStore
from ..ui.tasks_view_model import TasksViewModel

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.prefs_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    task_store = TaskStore(settings.tasks_db_path)
    if getattr(settings, "seed_sample_tasks", False):
        task_store.seed_sample_tasks()

    preferences = UserPreferencesRepository(SqlitePreferencesStore(settings.prefs_db_path))

    return AppState(
        settings=settings,
        task_store=task_store,
        preferences=preferences,
        view_model=TasksViewModel(task_store, preferences),
    )
