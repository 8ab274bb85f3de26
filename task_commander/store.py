"""Load and save the JSON task file.

The file holds one object with a ``tasks`` array. Each entry uses the
frontmatter field names of the notes the tasks were exported from::

    {"tasks": [{"index_id": 1, "title": "Pay rent", "status": "open",
                "due_date": "2026-11-01", "recur": "monthly", "tags": ["home"]}]}
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from task_commander.exceptions import TaskFileNotFoundError, TaskFileParseError
from task_commander.models import STATUS_OPEN, TASK_STATUSES, Task
from task_commander.utils.fileops import atomic_write

logger = logging.getLogger(__name__)

_STRING_KEYS = ("title", "status", "priority", "area", "assignee", "project_id", "recur", "content")
_DATE_KEYS = ("due_date", "start_date", "today_date")


def load_tasks(path: Path) -> list[Task]:
    """Read all tasks from *path*.

    Raises:
        TaskFileNotFoundError: If *path* does not exist.
        TaskFileParseError: If the file is not valid JSON, an entry is
            malformed, or two entries share an index_id.
    """
    if not path.exists():
        raise TaskFileNotFoundError(path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise TaskFileParseError(path, str(e)) from e

    if not isinstance(data, dict) or not isinstance(data.get("tasks"), list):
        raise TaskFileParseError(path, "expected an object with a 'tasks' array")

    tasks = [_task_from_dict(entry, path, i) for i, entry in enumerate(data["tasks"])]

    seen: set[int] = set()
    for task in tasks:
        if task.index_id in seen:
            raise TaskFileParseError(path, f"duplicate index_id {task.index_id}")
        seen.add(task.index_id)

    logger.debug("Loaded %d tasks from %s", len(tasks), path)
    return tasks


def save_tasks(path: Path, tasks: list[Task]) -> None:
    """Atomically replace *path* with *tasks*."""
    data = {"tasks": [task_to_dict(task) for task in tasks]}
    atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    logger.debug("Saved %d tasks to %s", len(tasks), path)


def task_to_dict(task: Task) -> dict[str, Any]:
    """Serialize a task to a JSON-compatible dict.

    Keys of the stored entry that the model does not cover are kept as
    they were, and so is the text of any date that failed to parse.
    """
    data: dict[str, Any] = dict(task.raw)
    data["index_id"] = task.index_id
    for key in _STRING_KEYS:
        data[key] = getattr(task, key)
    data["estimate"] = task.estimate
    for key in _DATE_KEYS:
        value = getattr(task, key)
        data[key] = value.isoformat() if value is not None else invalid_date_text(task, key)
    data["tags"] = list(task.tags)
    return data


def _task_from_dict(entry: Any, path: Path, position: int) -> Task:
    if not isinstance(entry, dict):
        raise TaskFileParseError(path, f"task #{position} is not an object")

    index_id = entry.get("index_id")
    if isinstance(index_id, bool) or not isinstance(index_id, int):
        raise TaskFileParseError(path, f"task #{position} has no integer index_id")

    fields: dict[str, Any] = {"index_id": index_id}

    for key in _STRING_KEYS:
        value = entry.get(key, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise TaskFileParseError(path, f"task {index_id}: {key} must be a string")
        fields[key] = value
    if not fields["status"]:
        fields["status"] = STATUS_OPEN
    elif fields["status"] not in TASK_STATUSES:
        logger.debug("Task %d has non-standard status %r", index_id, fields["status"])

    estimate = entry.get("estimate", 0) or 0
    if isinstance(estimate, bool) or not isinstance(estimate, int):
        raise TaskFileParseError(path, f"task {index_id}: estimate must be an integer")
    fields["estimate"] = estimate

    for key in _DATE_KEYS:
        value = entry.get(key) or ""
        if not isinstance(value, str):
            raise TaskFileParseError(path, f"task {index_id}: {key} must be a YYYY-MM-DD string")
        if not value:
            fields[key] = None
            continue
        fields[key] = _parse_date(value)
        if fields[key] is None:
            # Unparseable dates behave as unset, matching how notes are scanned
            logger.warning("Task %d: ignoring invalid %s %r", index_id, key, value)

    tags = entry.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise TaskFileParseError(path, f"task {index_id}: tags must be a list of strings")
    fields["tags"] = tuple(tags)
    fields["raw"] = entry

    return Task(**fields)


def invalid_date_text(task: Task, key: str) -> str:
    """Return the stored text of date *key* if it could not be parsed, else ``""``."""
    value = task.raw.get(key)
    if getattr(task, key) is not None or not isinstance(value, str) or not value:
        return ""
    return value if _parse_date(value) is None else ""


def _parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
