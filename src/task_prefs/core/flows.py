# src/task_prefs/core/flows.py

from __future__ import annotations

"""Small async-iterator combinators."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from typing import Any, TypeVar

A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")

logger = logging.getLogger(__name__)

_MISSING: Any = object()


async def combine_latest(
    first: AsyncIterator[A],
    second: AsyncIterator[B],
    combine: Callable[[A, B], R],
) -> AsyncIterator[R]:
    """
    Yield combine(a, b) whenever either input emits, once both have emitted.

    Each input is drained by its own pump task into a single "latest value"
    slot, so a slow input never delays the other and a slow consumer never
    builds a backlog: values that arrive while the consumer is busy collapse
    into one emission built from the newest pair. The first upstream exception
    is re-raised to the consumer. Closing this iterator cancels both pumps,
    which in turn closes the upstream iterators.
    """
    latest: list[Any] = [_MISSING, _MISSING]
    done = [False, False]
    failures: list[Exception] = []
    pending = False
    wake = asyncio.Event()

    async def pump(index: int, source: AsyncIterator[Any]) -> None:
        nonlocal pending
        try:
            async for item in source:
                latest[index] = item
                pending = True
                wake.set()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            failures.append(exc)
        finally:
            done[index] = True
            wake.set()

    pumps = [
        asyncio.create_task(pump(0, first)),
        asyncio.create_task(pump(1, second)),
    ]

    try:
        while True:
            if failures:
                raise failures[0]
            if pending and latest[0] is not _MISSING and latest[1] is not _MISSING:
                pending = False
                yield combine(latest[0], latest[1])
                continue
            if all(done):
                break
            await wake.wait()
            wake.clear()
    finally:
        for p in pumps:
            p.cancel()
        # Pumps record failures in `failures`, so only cancellations are collected here.
        await asyncio.gather(*pumps, return_exceptions=True)
        logger.debug("combine_latest closed (finished inputs=%d)", sum(done))
