"""Attach a recurrence pattern to a stored task, or clear it."""

from __future__ import annotations

import dataclasses

import click

from task_commander.cli import Context, pass_context
from task_commander.commands.recur import (
    EXIT_PATTERN_ERROR,
    EXIT_SUCCESS,
    EXIT_TASK_FILE_ERROR,
    cli,
)
from task_commander.exceptions import RecurrencePatternError, TaskNotFoundError, TaskStoreError
from task_commander.recurrence import parse_pattern
from task_commander.store import load_tasks, save_tasks
from task_commander.utils.output import error, success, verbose, warning

CLEAR_PATTERN = "none"


def resolve_recur_option(text: str) -> str:
    """Normalize a user-supplied pattern; ``none`` yields ``""`` (clear).

    Raises:
        RecurrencePatternError: If *text* is neither ``none`` nor a valid pattern.
    """
    if text.strip().lower() == CLEAR_PATTERN:
        return ""
    return parse_pattern(text)


@cli.command("set")
@click.argument("index_id", metavar="ID", type=int)
@click.argument("pattern", nargs=-1, required=True)
@pass_context
def assign(ctx: Context, index_id: int, pattern: tuple[str, ...]) -> None:
    """Store PATTERN on task ID; use "none" to stop the task recurring.

    The pattern is validated and saved in normalized form. Completing
    the task with `done` then creates its next instance.

    \b
    Examples:
      task-commander recur set 12 every 2w
      task-commander recur set 12 "every mon, thu"
      task-commander recur set 12 none
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_TASK_FILE_ERROR)

    text = " ".join(pattern)
    try:
        normalized = resolve_recur_option(text)
    except RecurrencePatternError as e:
        error(str(e), hint=f"Offending part: {e.fragment!r}" if e.fragment else None)
        raise SystemExit(EXIT_PATTERN_ERROR)

    try:
        tasks = load_tasks(config.tasks_file)
        pos = next((i for i, t in enumerate(tasks) if t.index_id == index_id), None)
        if pos is None:
            raise TaskNotFoundError(index_id)
    except TaskStoreError as e:
        error(str(e))
        raise SystemExit(EXIT_TASK_FILE_ERROR)

    task = tasks[pos]
    if task.recur == normalized:
        verbose(f"Task {index_id} already has recurrence {normalized or '(none)'}")
        raise SystemExit(EXIT_SUCCESS)

    tasks[pos] = dataclasses.replace(task, recur=normalized)
    try:
        save_tasks(config.tasks_file, tasks)
    except OSError as e:
        error(f"Failed to write task file: {e}")
        raise SystemExit(EXIT_TASK_FILE_ERROR)

    if not ctx.quiet:
        if normalized:
            success(f"Task {index_id} now recurs {normalized}")
            if task.due_date is None:
                warning(f"Task {index_id} has no due date; it recurs once one is set")
        else:
            success(f"Task {index_id} no longer recurs")
    raise SystemExit(EXIT_SUCCESS)
