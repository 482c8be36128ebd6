# prefs/prefs_repository.py

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from ..core.ports import PreferencesDataStore, PreferencesMapping
from .prefs_models import (
    SHOW_COMPLETED_KEY,
    SORT_ORDER_KEY,
    UserPreferences,
    map_user_preferences,
    read_sort_order,
)

logger = logging.getLogger(__name__)


class UserPreferencesRepository:
    """
    Saves and retrieves the task list preferences.

    The data store is injected; callers share one repository per store.
    All sort changes are read-modify-write transactions in the store, so
    concurrent deadline/priority toggles never overwrite each other.
    """

    def __init__(self, data_store: PreferencesDataStore) -> None:
        self._data_store = data_store

    async def user_preferences_stream(self) -> AsyncIterator[UserPreferences]:
        """
        Current preferences, then a fresh value after every store change.

        A transient I/O failure (OSError) on read yields default preferences and
        the stream keeps going. Anything else, including a corrupt sort_order,
        ends the stream for this subscriber.
        """
        async for _version in self._data_store.watch():
            try:
                prefs = await self._data_store.read()
            except OSError:
                logger.warning("Reading preferences failed; emitting defaults.", exc_info=True)
                prefs = {}
            yield map_user_preferences(prefs)

    async def fetch_initial_preferences(self) -> UserPreferences:
        return map_user_preferences(await self._data_store.read())

    async def update_show_completed(self, show_completed: bool) -> None:
        def transform(prefs: PreferencesMapping) -> None:
            prefs[SHOW_COMPLETED_KEY] = bool(show_completed)

        await self._data_store.edit(transform)
        logger.debug("show_completed -> %s", show_completed)

    async def enable_sort_by_deadline(self, enable: bool) -> None:
        """Enable / disable sort by deadline, keeping the priority switch as it is."""

        def transform(prefs: PreferencesMapping) -> None:
            current = read_sort_order(prefs)
            prefs[SORT_ORDER_KEY] = current.with_deadline(enable).value

        updated = await self._data_store.edit(transform)
        logger.debug("sort by deadline=%s -> %s", enable, updated.get(SORT_ORDER_KEY))

    async def enable_sort_by_priority(self, enable: bool) -> None:
        """Enable / disable sort by priority, keeping the deadline switch as it is."""

        def transform(prefs: PreferencesMapping) -> None:
            current = read_sort_order(prefs)
            prefs[SORT_ORDER_KEY] = current.with_priority(enable).value

        updated = await self._data_store.edit(transform)
        logger.debug("sort by priority=%s -> %s", enable, updated.get(SORT_ORDER_KEY))
