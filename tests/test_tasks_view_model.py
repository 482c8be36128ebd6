# tests/test_tasks_view_model.py

from __future__ import annotations

import asyncio
import contextlib

import pytest

from task_prefs.core.flows import combine_latest
from task_prefs.prefs.prefs_models import SortOrder
from task_prefs.prefs.prefs_repository import UserPreferencesRepository
from task_prefs.ui.tasks_view_model import TasksViewModel, filter_sort_tasks

from .fakes import FakePreferencesStore, FakeTaskSource, make_task


def _keys(tasks) -> list[tuple[int, int]]:
    return [(t.deadline.day, int(t.priority)) for t in tasks]


SAMPLE = [
    make_task(1, deadline=2, priority=1),
    make_task(2, deadline=5, priority=0, completed=True),
    make_task(3, deadline=5, priority=2),
]


def test_filter_sort_drops_completed_and_orders_by_deadline_then_priority() -> None:
    result = filter_sort_tasks(SAMPLE, False, SortOrder.BY_DEADLINE_AND_PRIORITY)
    assert _keys(result) == [(5, 2), (2, 1)]


def test_filter_sort_show_completed_keeps_everything() -> None:
    result = filter_sort_tasks(SAMPLE, True, SortOrder.NONE)
    assert [t.id for t in result] == [1, 2, 3]


def test_filter_sort_each_order() -> None:
    tasks = [
        make_task(1, deadline=3, priority=2),
        make_task(2, deadline=9, priority=1),
        make_task(3, deadline=3, priority=0),
        make_task(4, deadline=1, priority=1),
    ]

    assert [t.id for t in filter_sort_tasks(tasks, True, SortOrder.NONE)] == [1, 2, 3, 4]
    # Deadline descending; 1 and 3 tie and keep their incoming order.
    assert [t.id for t in filter_sort_tasks(tasks, True, SortOrder.BY_DEADLINE)] == [2, 1, 3, 4]
    # Priority ascending; 2 and 4 tie and keep their incoming order.
    assert [t.id for t in filter_sort_tasks(tasks, True, SortOrder.BY_PRIORITY)] == [3, 2, 4, 1]
    assert [t.id for t in filter_sort_tasks(tasks, True, SortOrder.BY_DEADLINE_AND_PRIORITY)] == [2, 3, 1, 4]


def test_filter_sort_does_not_mutate_input() -> None:
    tasks = list(SAMPLE)
    filter_sort_tasks(tasks, False, SortOrder.BY_DEADLINE)
    assert [t.id for t in tasks] == [1, 2, 3]


@pytest.mark.asyncio
async def test_ui_model_recomputed_when_either_input_changes() -> None:
    source = FakeTaskSource(SAMPLE)
    store = FakePreferencesStore()
    vm = TasksViewModel(source, UserPreferencesRepository(store))

    models = vm.tasks_ui_model()
    async with contextlib.aclosing(models):
        first = await asyncio.wait_for(anext(models), timeout=1.0)
        assert first.sort_order is SortOrder.NONE
        assert first.show_completed is False
        assert [t.id for t in first.tasks] == [1, 3]

        await vm.enable_sort_by_deadline(True)
        second = await asyncio.wait_for(anext(models), timeout=1.0)
        assert second.sort_order is SortOrder.BY_DEADLINE
        assert [t.id for t in second.tasks] == [3, 1]

        await vm.show_completed_tasks(True)
        third = await asyncio.wait_for(anext(models), timeout=1.0)
        assert third.show_completed is True
        assert [t.id for t in third.tasks] == [2, 3, 1]

        source.push([make_task(7, deadline=20, priority=2)])
        fourth = await asyncio.wait_for(anext(models), timeout=1.0)
        assert [t.id for t in fourth.tasks] == [7]
        assert fourth.sort_order is SortOrder.BY_DEADLINE


@pytest.mark.asyncio
async def test_closing_ui_model_releases_both_subscriptions() -> None:
    source = FakeTaskSource(SAMPLE)
    store = FakePreferencesStore()
    vm = TasksViewModel(source, UserPreferencesRepository(store))

    models = vm.tasks_ui_model()
    await asyncio.wait_for(anext(models), timeout=1.0)
    assert source.subscribers == 1
    assert store.subscribers == 1

    await models.aclose()

    assert source.subscribers == 0
    assert source.closed == 1
    assert store.subscribers == 0


@pytest.mark.asyncio
async def test_initial_setup_reads_persisted_preferences() -> None:
    store = FakePreferencesStore({"show_completed": True, "sort_order": "BY_PRIORITY"})
    vm = TasksViewModel(FakeTaskSource(), UserPreferencesRepository(store))

    prefs = await vm.initial_setup()
    assert prefs.show_completed is True
    assert prefs.sort_order is SortOrder.BY_PRIORITY


@pytest.mark.asyncio
async def test_combine_latest_waits_for_both_and_propagates_errors() -> None:
    async def numbers():
        yield 1
        yield 2

    async def broken():
        await asyncio.sleep(0.01)
        yield "a"
        await asyncio.sleep(0.01)
        raise ValueError("upstream failed")

    combined = combine_latest(numbers(), broken(), lambda n, s: f"{n}{s}")
    out: list[str] = []
    with pytest.raises(ValueError):
        async for item in combined:
            out.append(item)

    assert out == ["2a"]


@pytest.mark.asyncio
async def test_combine_latest_completes_when_both_inputs_complete() -> None:
    async def letters():
        yield "x"

    async def numbers():
        await asyncio.sleep(0.01)
        yield 1
        await asyncio.sleep(0.01)
        yield 2

    combined = combine_latest(letters(), numbers(), lambda s, n: (s, n))
    assert [item async for item in combined] == [("x", 1), ("x", 2)]


@pytest.mark.asyncio
async def test_combine_latest_slow_consumer_sees_only_newest_pair() -> None:
    gate = asyncio.Event()

    async def letters():
        yield "x"
        await asyncio.Event().wait()

    async def burst():
        yield 0
        await gate.wait()
        for n in range(1, 5):
            yield n
            await asyncio.sleep(0)
        await asyncio.Event().wait()

    combined = combine_latest(letters(), burst(), lambda s, n: (s, n))
    async with contextlib.aclosing(combined):
        assert await asyncio.wait_for(anext(combined), timeout=1.0) == ("x", 0)

        # The consumer is away while 1..4 arrive.
        gate.set()
        await asyncio.sleep(0.05)

        assert await asyncio.wait_for(anext(combined), timeout=1.0) == ("x", 4)
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(anext(combined), timeout=0.05)
