"""Recurring task patterns and next-occurrence computation."""

from task_commander.exceptions import (
    RecurrenceComputationError,
    RecurrenceError,
    RecurrencePatternError,
)
from task_commander.recurrence.pattern import WEEKDAYS, parse_pattern
from task_commander.recurrence.schedule import (
    next_instance,
    next_occurrence,
    upcoming_occurrences,
)

__all__ = [
    "WEEKDAYS",
    "RecurrenceComputationError",
    "RecurrenceError",
    "RecurrencePatternError",
    "next_instance",
    "next_occurrence",
    "parse_pattern",
    "upcoming_occurrences",
]
