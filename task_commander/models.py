"""Task record snapshot and due-date helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

# Task statuses
STATUS_OPEN = "open"
STATUS_DONE = "done"
STATUS_PAUSED = "paused"
STATUS_DELEGATED = "delegated"
STATUS_DROPPED = "dropped"

TASK_STATUSES: frozenset[str] = frozenset(
    {STATUS_OPEN, STATUS_DONE, STATUS_PAUSED, STATUS_DELEGATED, STATUS_DROPPED}
)

# Priority levels, most urgent first
PRIORITIES: tuple[str, ...] = ("p1", "p2", "p3")


@dataclass(frozen=True)
class Task:
    """Read-only snapshot of one stored task.

    String attributes use ``""`` for "not set"; dates use ``None``.
    ``recur`` holds a normalized recurrence pattern. ``raw`` is the stored
    entry the snapshot was read from; it is written back for keys the
    model does not know and for dates that could not be parsed.
    """

    index_id: int
    title: str = ""
    status: str = STATUS_OPEN
    priority: str = ""
    area: str = ""
    assignee: str = ""
    project_id: str = ""
    estimate: int = 0
    due_date: date | None = None
    start_date: date | None = None
    today_date: date | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    recur: str = ""
    content: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def is_tagged_for_today(self, today: date) -> bool:
        """Return whether the task was tagged for *today*."""
        return self.today_date is not None and self.today_date == today


def days_until(due: date | None, today: date) -> int | None:
    """Days from *today* until *due*; negative when past, None when unset."""
    if due is None:
        return None
    return (due - today).days


def is_overdue(due: date | None, today: date) -> bool:
    days = days_until(due, today)
    return days is not None and days < 0


def is_due_within(due: date | None, today: date, horizon_days: int) -> bool:
    """Return True if *due* falls between today and today + *horizon_days*, inclusive."""
    days = days_until(due, today)
    return days is not None and 0 <= days <= horizon_days


def priority_rank(priority: str) -> int:
    """Sort rank for a priority; unset and unknown priorities sort last."""
    try:
        return PRIORITIES.index(priority.lower())
    except ValueError:
        return len(PRIORITIES)
