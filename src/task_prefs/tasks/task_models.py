# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import IntEnum


class TaskPriority(IntEnum):
    """
    Task priority.

    Lower value = more important, so an ascending sort lists HIGH first.
    """

    HIGH = 0
    MEDIUM = 1
    LOW = 2

    @classmethod
    def parse(cls, raw: str) -> TaskPriority:
        try:
            return cls[raw.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown priority: {raw!r} (expected HIGH, MEDIUM or LOW)") from None

    @classmethod
    def from_db(cls, raw: int | None) -> TaskPriority:
        if raw is None:
            return cls.MEDIUM
        try:
            return cls(int(raw))
        except ValueError:
            return cls.MEDIUM


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    name: str
    deadline: date
    priority: TaskPriority
    completed: bool = False
