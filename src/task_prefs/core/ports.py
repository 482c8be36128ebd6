# src/task_prefs/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The preference repository and the view model depend on Protocols instead of
concrete stores. This keeps storage swappable and makes testing easier.
"""

from collections.abc import AsyncIterator, Callable
from typing import Any, Protocol

from ..tasks.task_models import Task

PreferencesMapping = dict[str, Any]
# Raw preference entries as stored: {"show_completed": True, "sort_order": "BY_DEADLINE"}.


class PreferencesDataStore(Protocol):
    """
    Asynchronous key-value store for user preferences.

    - read() raises OSError for transient I/O problems
    - edit() runs transform on a mutable copy inside one transaction
    """

    async def read(self) -> PreferencesMapping: ...

    def watch(self) -> AsyncIterator[int]: ...

    async def edit(self, transform: Callable[[PreferencesMapping], None]) -> PreferencesMapping: ...


class TaskSource(Protocol):
    """Externally owned task list; emits the full list on subscribe and after every change."""

    def tasks_stream(self) -> AsyncIterator[list[Task]]: ...
