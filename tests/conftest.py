# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_prefs.core.state import AppState
from task_prefs.prefs.prefs_repository import UserPreferencesRepository
from task_prefs.prefs.prefs_store import SqlitePreferencesStore
from task_prefs.tasks.task_store import TaskStore
from task_prefs.ui.tasks_view_model import TasksViewModel


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-prefs-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        prefs_db_path=tmp_path / "preferences.sqlite3",
        tasks_db_path=tmp_path / "tasks.sqlite3",
        seed_sample_tasks=False,
    )


@pytest.fixture()
def prefs_store(settings: SimpleNamespace) -> SqlitePreferencesStore:
    return SqlitePreferencesStore(settings.prefs_db_path)


@pytest.fixture()
def task_store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    prefs_store: SqlitePreferencesStore,
    task_store: TaskStore,
) -> AppState:
    """
    AppState wired with real SQLite stores.

    NOTE: the stores' transactional behaviour is part of what we want to test,
    so fakes are only used where a failure has to be injected.
    """
    preferences = UserPreferencesRepository(prefs_store)
    return AppState(
        settings=settings,
        task_store=task_store,
        preferences=preferences,
        view_model=TasksViewModel(task_store, preferences),
    )
