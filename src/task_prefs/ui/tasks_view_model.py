# ui/tasks_view_model.py

from __future__ import annotations

"""
Task list view model.

Combines the task source with the preference stream into TasksUiModel values
and exposes the mutation entry points used by the front end. Rendering is the
caller's business.
"""

import logging
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass

from ..core.flows import combine_latest
from ..core.ports import TaskSource
from ..prefs.prefs_models import SortOrder, UserPreferences
from ..prefs.prefs_repository import UserPreferencesRepository
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TasksUiModel:
    tasks: list[Task]
    show_completed: bool
    sort_order: SortOrder


def filter_sort_tasks(
    tasks: Iterable[Task],
    show_completed: bool,
    sort_order: SortOrder,
) -> list[Task]:
    """
    Drop completed tasks unless show_completed, then order by sort_order.

    All sorts are stable: tasks that compare equal keep their incoming order.
    """
    if show_completed:
        filtered = list(tasks)
    else:
        filtered = [t for t in tasks if not t.completed]

    if sort_order is SortOrder.BY_DEADLINE:
        return sorted(filtered, key=lambda t: t.deadline, reverse=True)
    if sort_order is SortOrder.BY_PRIORITY:
        return sorted(filtered, key=lambda t: t.priority)
    if sort_order is SortOrder.BY_DEADLINE_AND_PRIORITY:
        # Secondary key first; the stable primary sort keeps it for deadline ties.
        by_priority = sorted(filtered, key=lambda t: t.priority)
        return sorted(by_priority, key=lambda t: t.deadline, reverse=True)
    return filtered


def build_ui_model(tasks: list[Task], prefs: UserPreferences) -> TasksUiModel:
    sort_order = prefs.sort_order
    return TasksUiModel(
        tasks=filter_sort_tasks(tasks, prefs.show_completed, sort_order),
        show_completed=prefs.show_completed,
        sort_order=sort_order,
    )


class TasksViewModel:
    def __init__(
        self,
        task_source: TaskSource,
        preferences: UserPreferencesRepository,
    ) -> None:
        self._task_source = task_source
        self._preferences = preferences

    def tasks_ui_model(self) -> AsyncIterator[TasksUiModel]:
        """A new UI model every time the task list or the preferences change."""
        return combine_latest(
            self._task_source.tasks_stream(),
            self._preferences.user_preferences_stream(),
            build_ui_model,
        )

    async def initial_setup(self) -> UserPreferences:
        """Preferences as currently persisted, for setting up controls before the first model."""
        return await self._preferences.fetch_initial_preferences()

    async def show_completed_tasks(self, show: bool) -> None:
        logger.debug("show_completed_tasks(%s)", show)
        await self._preferences.update_show_completed(show)

    async def enable_sort_by_deadline(self, enable: bool) -> None:
        logger.debug("enable_sort_by_deadline(%s)", enable)
        await self._preferences.enable_sort_by_deadline(enable)

    async def enable_sort_by_priority(self, enable: bool) -> None:
        logger.debug("enable_sort_by_priority(%s)", enable)
        await self._preferences.enable_sort_by_priority(enable)
