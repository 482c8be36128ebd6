# src/task_prefs/core/changes.py

from __future__ import annotations

"""
Change notification shared by the SQLite stores.

Stores call notify() after a committed write; subscribers iterate watch() and
re-read whatever they need. Several writes between two reads collapse into a
single wake-up (latest-state semantics, not an event log).
"""

import asyncio
from collections.abc import AsyncIterator


class ChangeNotifier:
    def __init__(self) -> None:
        self._version = 0
        self._waiters: set[asyncio.Event] = set()

    @property
    def version(self) -> int:
        return self._version

    @property
    def watcher_count(self) -> int:
        return len(self._waiters)

    def notify(self) -> None:
        """Bump the version and wake every watcher. Must run on the event loop thread."""
        self._version += 1
        for ev in list(self._waiters):
            ev.set()

    async def watch(self) -> AsyncIterator[int]:
        """
        Yield the current version right away, then once per wake-up.

        The watcher is unregistered when the iterator is closed or cancelled.
        """
        ev = asyncio.Event()
        self._waiters.add(ev)
        try:
            yield self._version
            while True:
                await ev.wait()
                ev.clear()
                yield self._version
        finally:
            self._waiters.discard(ev)
