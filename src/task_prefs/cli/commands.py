# src/task_prefs/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import date

from ..core.state import AppState
from ..tasks.task_models import TaskPriority
from ..ui.tasks_view_model import TasksUiModel

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

logger = logging.getLogger(__name__)

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /sort, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_switch(raw: str) -> bool | None:
    arg = raw.lower()
    if arg in _ON:
        return True
    if arg in _OFF:
        return False
    return None


def render_ui_model(model: TasksUiModel) -> str:
    lines = [
        f"Tasks (sort: {model.sort_order.value}, completed: {'shown' if model.show_completed else 'hidden'}):"
    ]
    if not model.tasks:
        lines.append("  (no tasks)")
    for t in model.tasks:
        mark = "x" if t.completed else " "
        lines.append(f"  [{mark}] #{t.id} {t.deadline.isoformat()} {t.priority.name:<6} {t.name}")
    return "\n".join(lines)


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_tasks(state: AppState, args: list[str]) -> str:
    if state.ui_model is None:
        return "Task list is not loaded yet."
    return render_ui_model(state.ui_model)


async def cmd_prefs(state: AppState, args: list[str]) -> str:
    prefs = await state.view_model.initial_setup()
    return (
        "Preferences:\n"
        f"  Show completed: {'ON' if prefs.show_completed else 'OFF'}\n"
        f"  Sort by deadline: {'ON' if prefs.sort_by_deadline else 'OFF'}\n"
        f"  Sort by priority: {'ON' if prefs.sort_by_priority else 'OFF'}\n"
        f"  Stored sort order: {prefs.sort_order.value}"
    )


async def cmd_completed(state: AppState, args: list[str]) -> str:
    """
    /completed on   -> show completed tasks
    /completed off  -> hide completed tasks
    """
    show = _parse_switch(args[0]) if args else None
    if show is None:
        return "Usage: /completed on or /completed off."
    await state.view_model.show_completed_tasks(show)
    return f"Completed tasks are now {'shown' if show else 'hidden'}."


async def cmd_sort(state: AppState, args: list[str]) -> str:
    """
    /sort deadline on|off
    /sort priority on|off
    """
    usage = "Usage: /sort deadline on|off or /sort priority on|off."
    if len(args) != 2:
        return usage

    axis = args[0].lower()
    enable = _parse_switch(args[1])
    if enable is None:
        return usage

    logger.debug("Sort change requested axis=%s enable=%s", axis, enable)
    if axis == "deadline":
        await state.view_model.enable_sort_by_deadline(enable)
    elif axis == "priority":
        await state.view_model.enable_sort_by_priority(enable)
    else:
        return usage

    return f"Sort by {axis} {'enabled' if enable else 'disabled'}."


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add YYYY-MM-DD HIGH|MEDIUM|LOW task name..."""
    usage = "Usage: /add YYYY-MM-DD HIGH|MEDIUM|LOW task name"
    if len(args) < 3:
        return usage
    try:
        deadline = date.fromisoformat(args[0])
        priority = TaskPriority.parse(args[1])
    except ValueError as e:
        return f"{e}\n{usage}"

    task_id = state.task_store.add_task(
        name=" ".join(args[2:]),
        deadline=deadline,
        priority=priority,
    )
    return f"Task #{task_id} added."


async def _set_completed(state: AppState, args: list[str], completed: bool) -> str:
    if len(args) != 1 or not args[0].lstrip("#").isdigit():
        return "Usage: /done ID or /undone ID."
    task_id = int(args[0].lstrip("#"))
    if not state.task_store.set_completed(task_id, completed):
        return f"No task #{task_id}."
    return f"Task #{task_id} marked {'completed' if completed else 'open'}."


async def cmd_done(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, True)


async def cmd_undone(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, False)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("tasks", cmd_tasks, help_text="Show the task list.", aliases=["ls"])
registry.register("prefs", cmd_prefs, help_text="Show stored preferences.")
registry.register("completed", cmd_completed, help_text="Show/hide completed: /completed on | off.")
registry.register("sort", cmd_sort, help_text="Sorting: /sort deadline|priority on|off.")
registry.register("add", cmd_add, help_text="Add a task: /add YYYY-MM-DD HIGH|MEDIUM|LOW name.")
registry.register("done", cmd_done, help_text="Mark a task completed: /done ID.")
registry.register("undone", cmd_undone, help_text="Reopen a task: /undone ID.")
