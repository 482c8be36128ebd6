# prefs/prefs_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

SHOW_COMPLETED_KEY = "show_completed"
SORT_ORDER_KEY = "sort_order"


class PreferencesDecodeError(ValueError):
    """A stored preference value has the wrong type or an unknown value."""


class SortOrderDecodeError(PreferencesDecodeError):
    """Persisted sort_order is not one of the known names."""


class SortOrder(StrEnum):
    """
    Task list ordering as persisted on disk.

    Notes:
    - the four values pack two independent switches (deadline, priority);
      code that changes one switch should go through with_deadline()/with_priority()
    - the stored string is the member name, so values equal names
    """

    NONE = "NONE"
    BY_DEADLINE = "BY_DEADLINE"
    BY_PRIORITY = "BY_PRIORITY"
    BY_DEADLINE_AND_PRIORITY = "BY_DEADLINE_AND_PRIORITY"

    @classmethod
    def decode(cls, raw: str | None) -> SortOrder:
        # Absent entry means "never set"; anything unknown is corruption and is not defaulted.
        if raw is None:
            return cls.NONE
        try:
            return cls(raw)
        except ValueError as e:
            raise SortOrderDecodeError(f"Unknown sort_order value: {raw!r}") from e

    @classmethod
    def from_flags(cls, *, by_deadline: bool, by_priority: bool) -> SortOrder:
        if by_deadline and by_priority:
            return cls.BY_DEADLINE_AND_PRIORITY
        if by_deadline:
            return cls.BY_DEADLINE
        if by_priority:
            return cls.BY_PRIORITY
        return cls.NONE

    @property
    def by_deadline(self) -> bool:
        return self in (SortOrder.BY_DEADLINE, SortOrder.BY_DEADLINE_AND_PRIORITY)

    @property
    def by_priority(self) -> bool:
        return self in (SortOrder.BY_PRIORITY, SortOrder.BY_DEADLINE_AND_PRIORITY)

    def with_deadline(self, enable: bool) -> SortOrder:
        return SortOrder.from_flags(by_deadline=enable, by_priority=self.by_priority)

    def with_priority(self, enable: bool) -> SortOrder:
        return SortOrder.from_flags(by_deadline=self.by_deadline, by_priority=enable)


@dataclass(frozen=True, slots=True)
class UserPreferences:
    show_completed: bool = False
    sort_by_deadline: bool = False
    sort_by_priority: bool = False

    @classmethod
    def from_sort_order(cls, *, show_completed: bool, sort_order: SortOrder) -> UserPreferences:
        return cls(
            show_completed=show_completed,
            sort_by_deadline=sort_order.by_deadline,
            sort_by_priority=sort_order.by_priority,
        )

    @property
    def sort_order(self) -> SortOrder:
        return SortOrder.from_flags(
            by_deadline=self.sort_by_deadline,
            by_priority=self.sort_by_priority,
        )


def read_sort_order(prefs: Mapping[str, Any]) -> SortOrder:
    """Stored sort order; NONE only when the key is absent, never for a stored null."""
    if SORT_ORDER_KEY not in prefs:
        return SortOrder.NONE
    raw = prefs[SORT_ORDER_KEY]
    if not isinstance(raw, str):
        raise SortOrderDecodeError(f"sort_order must be a string, got {raw!r}")
    return SortOrder.decode(raw)


def read_show_completed(prefs: Mapping[str, Any]) -> bool:
    raw = prefs.get(SHOW_COMPLETED_KEY, False)
    # bool("false") is True, so anything but a real boolean is corruption.
    if not isinstance(raw, bool):
        raise PreferencesDecodeError(f"show_completed must be a boolean, got {raw!r}")
    return raw


def map_user_preferences(prefs: Mapping[str, Any]) -> UserPreferences:
    """Build UserPreferences from raw entries, defaulting absent keys and rejecting corrupt ones."""
    sort_order = read_sort_order(prefs)
    show_completed = read_show_completed(prefs)
    return UserPreferences.from_sort_order(show_completed=show_completed, sort_order=sort_order)
