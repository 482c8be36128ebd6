# tests/test_task_store.py

from __future__ import annotations

import asyncio
import contextlib
from datetime import date
from pathlib import Path

import pytest

from task_prefs.tasks.task_models import TaskPriority
from task_prefs.tasks.task_store import SAMPLE_TASKS, TaskStore


def test_task_add_list_complete(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")

    t1 = store.add_task(name="  Write docs ", deadline=date(2020, 5, 1), priority=TaskPriority.HIGH)
    t2 = store.add_task(name="Ship", deadline=date(2020, 6, 1), priority=TaskPriority.LOW, completed=True)
    assert t2 > t1 > 0
    assert store.count_tasks() == 2

    tasks = store.list_tasks()
    assert [t.id for t in tasks] == [t1, t2]
    assert tasks[0].name == "Write docs"
    assert tasks[0].deadline == date(2020, 5, 1)
    assert tasks[0].priority is TaskPriority.HIGH
    assert tasks[1].completed is True

    assert store.set_completed(t1, True) is True
    assert store.list_tasks()[0].completed is True
    assert store.set_completed(9999, True) is False


def test_add_task_requires_name(task_store: TaskStore) -> None:
    with pytest.raises(ValueError):
        task_store.add_task(name="   ", deadline=date(2020, 1, 1))


def test_seed_sample_tasks_only_into_empty_store(task_store: TaskStore) -> None:
    assert task_store.seed_sample_tasks() == len(SAMPLE_TASKS)
    assert task_store.seed_sample_tasks() == 0
    assert task_store.count_tasks() == len(SAMPLE_TASKS)


def test_priority_parse() -> None:
    assert TaskPriority.parse("high") is TaskPriority.HIGH
    assert TaskPriority.parse(" Low ") is TaskPriority.LOW
    with pytest.raises(ValueError):
        TaskPriority.parse("urgent")


@pytest.mark.asyncio
async def test_tasks_stream_emits_after_each_change(task_store: TaskStore) -> None:
    stream = task_store.tasks_stream()
    async with contextlib.aclosing(stream):
        assert await anext(stream) == []

        task_id = task_store.add_task(name="First", deadline=date(2020, 7, 1))
        tasks = await asyncio.wait_for(anext(stream), timeout=1.0)
        assert [t.id for t in tasks] == [task_id]

        task_store.set_completed(task_id, True)
        tasks = await asyncio.wait_for(anext(stream), timeout=1.0)
        assert tasks[0].completed is True
