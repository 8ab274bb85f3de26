"""Compute the next due date of a recurring task."""

from __future__ import annotations

import dataclasses
import itertools
import logging
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from task_commander.exceptions import RecurrenceComputationError
from task_commander.models import STATUS_OPEN, Task
from task_commander.recurrence.pattern import (
    EVERY_PREFIX,
    KEYWORDS,
    WEEKDAYS,
    split_interval,
    split_weekdays,
)

logger = logging.getLogger(__name__)

_UNIT_NAMES: dict[str, str] = {"d": "days", "w": "weeks", "m": "months", "y": "years"}


def next_occurrence(pattern: str, current_due: date, today: date | None = None) -> date:
    """Return the next due date after *current_due* for *pattern*.

    The result is never before *today*: a task completed several periods
    late skips every missed period. Month and year steps follow the
    calendar, clamping to the last day of shorter months.

    Args:
        pattern: A normalized recurrence pattern.
        current_due: The due date of the occurrence being completed.
        today: Reference date. Defaults to the current local date.

    Raises:
        RecurrenceComputationError: If the pattern cannot be interpreted.
    """
    if today is None:
        today = date.today()
    normalized = pattern.strip().lower()

    if normalized in KEYWORDS:
        count, unit = KEYWORDS[normalized]
        next_due = _advance_by_interval(current_due, count, unit, today)
    elif normalized.startswith(EVERY_PREFIX):
        spec = normalized[len(EVERY_PREFIX) :].strip()
        next_due = _next_from_spec(pattern, spec, current_due, today)
    else:
        raise RecurrenceComputationError(pattern, normalized, "unrecognized pattern")

    logger.debug("Next occurrence of %r after %s is %s", pattern, current_due, next_due)
    return next_due


def upcoming_occurrences(
    pattern: str, current_due: date, count: int, today: date | None = None
) -> list[date]:
    """Return the next *count* occurrences, each computed from the previous one."""
    if today is None:
        today = date.today()
    dates: list[date] = []
    due = current_due
    for _ in range(count):
        due = next_occurrence(pattern, due, today)
        dates.append(due)
    return dates


def next_instance(task: Task, *, index_id: int, today: date | None = None) -> Task | None:
    """Build the task that follows *task* once it is completed.

    Returns None when *task* does not recur or has no due date. The new
    task is open, due on the next occurrence, and no longer tagged for today.

    Raises:
        RecurrenceComputationError: If the stored pattern cannot be used.
    """
    if not task.recur or task.due_date is None:
        return None

    next_due = next_occurrence(task.recur, task.due_date, today)
    return dataclasses.replace(
        task,
        index_id=index_id,
        status=STATUS_OPEN,
        due_date=next_due,
        today_date=None,
    )


def _next_from_spec(pattern: str, spec: str, current_due: date, today: date) -> date:
    interval = split_interval(spec)
    if interval is not None:
        count, unit = interval
        if count <= 0:
            raise RecurrenceComputationError(
                pattern, spec, f"interval {count} must be a positive number"
            )
        return _advance_by_interval(current_due, count, unit, today)

    weekdays: set[int] = set()
    for day in split_weekdays(spec):
        if day not in WEEKDAYS:
            raise RecurrenceComputationError(pattern, day, f"unknown day: {day!r}")
        weekdays.add(WEEKDAYS[day])

    return _next_matching_weekday(current_due, weekdays, today)


def _advance_by_interval(current_due: date, count: int, unit: str, today: date) -> date:
    """Step *current_due* forward one interval at a time until it reaches *today*.

    Each step is measured from *current_due* so month-end clamping in one
    step does not shift later ones.
    """
    unit_name = _UNIT_NAMES[unit]
    for step in itertools.count(1):
        candidate = current_due + relativedelta(**{unit_name: count * step})
        if candidate >= today:
            return candidate
    raise AssertionError("unreachable")


def _next_matching_weekday(current_due: date, weekdays: set[int], today: date) -> date:
    """First date after *current_due*, and not before *today*, on one of *weekdays*."""
    candidate = max(current_due + timedelta(days=1), today)
    for _ in range(7):
        if candidate.weekday() in weekdays:
            return candidate
        candidate += timedelta(days=1)
    # weekdays is never empty, split_weekdays always yields at least one token
    raise AssertionError(f"no weekday in {sorted(weekdays)} within a week")
