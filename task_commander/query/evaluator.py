"""Evaluate parsed filter queries against task records."""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date
from typing import TYPE_CHECKING, assert_never

from task_commander.models import Task, days_until, is_due_within, is_overdue
from task_commander.query.ast_nodes import BooleanOp, Comparison, Node

if TYPE_CHECKING:
    from task_commander.config import Config

# Plain string attributes, keyed by query field name
_STRING_FIELDS: dict[str, str] = {
    "status": "status",
    "priority": "priority",
    "area": "area",
    "assignee": "assignee",
    "project_id": "project_id",
    "title": "title",
    "recur": "recur",
}

_DATE_FIELDS: dict[str, str] = {
    "due": "due_date",
    "due_date": "due_date",
    "start": "start_date",
    "start_date": "start_date",
    "today": "today_date",
    "today_date": "today_date",
}

_INT_FIELDS: dict[str, str] = {
    "estimate": "estimate",
    "index_id": "index_id",
}

_TAG_FIELDS: frozenset[str] = frozenset({"tag", "tags"})
_CONTENT_FIELDS: frozenset[str] = frozenset({"content", "body", "text"})

# Sentinels accepted by every string, date and tag field
_BLANK_SENTINELS: frozenset[str] = frozenset({"empty", "set"})
_DUE_SENTINELS: frozenset[str] = frozenset({"overdue", "today", "week", "soon"})
_TODAY_SENTINELS: frozenset[str] = frozenset({"tagged", "true"})

_INTEGER = re.compile(r"[+-]?\d+")

WEEK_DAYS = 7


def evaluate(node: Node, task: Task, config: Config, *, today: date | None = None) -> bool:
    """Return whether *task* satisfies the query rooted at *node*.

    Args:
        node: Parsed query.
        task: Task snapshot to test.
        config: Settings; only ``soon_horizon`` is consulted.
        today: Reference date for relative due-date sentinels.
            Defaults to the current local date.
    """
    if today is None:
        today = date.today()
    return _evaluate(node, task, config, today)


def _evaluate(node: Node, task: Task, config: Config, today: date) -> bool:
    match node:
        case Comparison():
            return _compare(node, task, config, today)
        case BooleanOp(op="AND", left=left, right=right):
            return _evaluate(left, task, config, today) and _evaluate(right, task, config, today)
        case BooleanOp(op="OR", left=left, right=right):
            return _evaluate(left, task, config, today) or _evaluate(right, task, config, today)
        case BooleanOp(op="NOT", left=left):
            return not _evaluate(left, task, config, today)
        case BooleanOp():
            return False
        case _:
            assert_never(node)


def filter_tasks(
    node: Node,
    tasks: Iterable[Task],
    config: Config,
    *,
    today: date | None = None,
) -> list[Task]:
    """Return the tasks matching *node*, in their original order."""
    if today is None:
        today = date.today()
    return [task for task in tasks if _evaluate(node, task, config, today)]


def _compare(node: Comparison, task: Task, config: Config, today: date) -> bool:
    """Evaluate one comparison. Malformed clauses evaluate to False."""
    field = node.field.lower()
    operator = node.operator
    value = node.value.lower()

    if field in _STRING_FIELDS:
        actual = getattr(task, _STRING_FIELDS[field])
        if value in _BLANK_SENTINELS:
            return _blank_sentinel(actual, operator, value)
        return _compare_string(actual.lower(), operator, value)

    if field in _DATE_FIELDS:
        attr = _DATE_FIELDS[field]
        actual_date: date | None = getattr(task, attr)
        if value in _BLANK_SENTINELS:
            return _blank_sentinel(actual_date, operator, value)
        if attr == "due_date" and value in _DUE_SENTINELS:
            return operator == ":" and _due_sentinel(actual_date, value, config, today)
        if attr == "today_date" and value in _TODAY_SENTINELS:
            return operator == ":" and task.is_tagged_for_today(today)
        iso = actual_date.isoformat() if actual_date is not None else ""
        return _compare_string(iso, operator, value)

    if field in _INT_FIELDS:
        return _compare_int(getattr(task, _INT_FIELDS[field]), operator, value)

    if field in _TAG_FIELDS:
        if value in _BLANK_SENTINELS:
            return _blank_sentinel(task.tags, operator, value)
        tags = {tag.lower() for tag in task.tags}
        if operator in (":", "="):
            return value in tags
        if operator == "!=":
            return value not in tags
        return False

    if field in _CONTENT_FIELDS:
        contains = value in task.content.lower()
        if operator in (":", "="):
            return contains
        if operator == "!=":
            return not contains
        return False

    # Unknown field
    return False


def _blank_sentinel(actual: object, operator: str, sentinel: str) -> bool:
    if operator != ":":
        return False
    is_blank = not actual
    return is_blank if sentinel == "empty" else not is_blank


def _due_sentinel(due: date | None, sentinel: str, config: Config, today: date) -> bool:
    if sentinel == "overdue":
        return is_overdue(due, today)
    if sentinel == "today":
        return days_until(due, today) == 0
    if sentinel == "week":
        return is_due_within(due, today, WEEK_DAYS)
    return is_due_within(due, today, config.soon_horizon)


def _compare_string(actual: str, operator: str, expected: str) -> bool:
    if operator in (":", "="):
        return actual == expected
    if operator == "!=":
        return actual != expected
    return False


def _compare_int(actual: int, operator: str, expected_text: str) -> bool:
    if not _INTEGER.fullmatch(expected_text):
        return False
    expected = int(expected_text)

    if operator in (":", "="):
        return actual == expected
    if operator == "!=":
        return actual != expected
    if operator == ">":
        return actual > expected
    if operator == "<":
        return actual < expected
    return False
