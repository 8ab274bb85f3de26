"""Mark tasks done, rolling recurring tasks forward."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime

import click

from task_commander.cli import Context, pass_context
from task_commander.exceptions import RecurrenceError, TaskNotFoundError, TaskStoreError
from task_commander.models import STATUS_DONE, Task
from task_commander.recurrence import next_instance
from task_commander.store import invalid_date_text, load_tasks, save_tasks
from task_commander.utils.output import error, info, success, verbose, warning

EXIT_SUCCESS = 0
EXIT_TASK_FILE_ERROR = 2
EXIT_RECURRENCE_ERROR = 3


def complete_tasks(
    tasks: list[Task], ids: tuple[int, ...], today: date
) -> tuple[list[Task], list[Task], list[tuple[int, str]]]:
    """Mark *ids* done and append the next instance of recurring ones.

    A task whose recurrence cannot be computed, including a recurring
    task without a usable due date, is left unchanged and reported in the
    failure list; the other ids are still completed.

    Returns:
        Tuple of (updated task list, spawned tasks, (id, reason) failures).

    Raises:
        TaskNotFoundError: If an id is not in *tasks*.
    """
    by_id = {task.index_id: pos for pos, task in enumerate(tasks)}
    updated = list(tasks)
    spawned: list[Task] = []
    failed: list[tuple[int, str]] = []
    next_id = max(by_id, default=0) + 1

    for index_id in ids:
        if index_id not in by_id:
            raise TaskNotFoundError(index_id)
        pos = by_id[index_id]
        task = updated[pos]
        if task.status == STATUS_DONE:
            warning(f"Task {index_id} is already done")
            continue

        if task.recur and task.due_date is None:
            bad_due = invalid_date_text(task, "due_date")
            reason = (
                f"failed to parse due date {bad_due!r}"
                if bad_due
                else "recurring task has no due date"
            )
            failed.append((index_id, reason))
            continue

        try:
            follow_up = next_instance(task, index_id=next_id, today=today)
        except RecurrenceError as e:
            failed.append((index_id, str(e)))
            continue

        updated[pos] = dataclasses.replace(task, status=STATUS_DONE)
        if follow_up is not None:
            updated.append(follow_up)
            spawned.append(follow_up)
            next_id += 1

    return updated, spawned, failed


@click.command("done")
@click.argument("ids", nargs=-1, type=int, required=True)
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Complete as if today were this date (YYYY-MM-DD)",
)
@click.option(
    "--dry-run",
    "-n",
    is_flag=True,
    default=False,
    help="Show what would change without writing the task file",
)
@pass_context
def cli(ctx: Context, ids: tuple[int, ...], today: datetime | None, dry_run: bool) -> None:
    """Mark the tasks with the given IDs as done.

    A completed task with a recurrence pattern and a due date spawns
    a new open task due on the next occurrence.

    \b
    Examples:
      task-commander done 12
      task-commander done 3 7 --dry-run
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_TASK_FILE_ERROR)

    reference = today.date() if today is not None else date.today()

    try:
        tasks = load_tasks(config.tasks_file)
        updated, spawned, failed = complete_tasks(tasks, ids, reference)
    except TaskStoreError as e:
        error(str(e))
        raise SystemExit(EXIT_TASK_FILE_ERROR)

    for index_id, reason in failed:
        error(f"Task {index_id} left unchanged: {reason}")

    changed = updated != tasks
    if changed and not dry_run:
        try:
            save_tasks(config.tasks_file, updated)
        except OSError as e:
            error(f"Failed to write task file: {e}")
            raise SystemExit(EXIT_TASK_FILE_ERROR)

    if not ctx.quiet:
        prefix = "Would create" if dry_run else "Created"
        for task in spawned:
            due = task.due_date.isoformat() if task.due_date else ""
            info(f"↻ {prefix} recurring task ID {task.index_id}: {task.title} (due {due})")
        completed = sum(1 for old, new in zip(tasks, updated) if old.status != new.status)
        if changed:
            success(f"{'Would complete' if dry_run else 'Completed'} {completed} task(s)")
        else:
            verbose("Nothing to change")

    raise SystemExit(EXIT_RECURRENCE_ERROR if failed else EXIT_SUCCESS)
