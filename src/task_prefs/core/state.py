# src/task_prefs/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..prefs.prefs_repository import UserPreferencesRepository
from ..tasks.task_store import TaskStore
from ..ui.tasks_view_model import TasksUiModel, TasksViewModel


@dataclass
class AppState:
    settings: Any

    task_store: TaskStore
    preferences: UserPreferencesRepository
    view_model: TasksViewModel

    # Latest model rendered by the console; None until the first emission.
    ui_model: TasksUiModel | None = None
