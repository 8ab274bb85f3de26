"""Update every task matching a filter query."""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Any

import click

from task_commander.cli import Context, pass_context
from task_commander.commands.done import complete_tasks
from task_commander.commands.recur.assign import resolve_recur_option
from task_commander.exceptions import QueryError, RecurrencePatternError, TaskStoreError
from task_commander.models import STATUS_DONE, TASK_STATUSES, Task
from task_commander.query import filter_tasks, parse_query
from task_commander.store import load_tasks, save_tasks
from task_commander.utils.output import error, info, success, verbose

EXIT_SUCCESS = 0
EXIT_QUERY_ERROR = 1
EXIT_TASK_FILE_ERROR = 2
EXIT_RECURRENCE_ERROR = 3


def apply_updates(
    tasks: list[Task], ids: list[int], updates: dict[str, Any], today: date
) -> tuple[list[Task], list[Task], list[tuple[int, str]]]:
    """Apply field *updates* to the tasks with *ids*.

    A ``status`` of ``done`` goes through :func:`complete_tasks`, so
    recurring tasks spawn their next instance (computed from the updated
    fields). A task whose recurrence fails keeps all of its old values.

    Returns:
        Tuple of (updated task list, spawned tasks, (id, reason) failures).
    """
    fields = dict(updates)
    completing = fields.get("status") == STATUS_DONE
    if completing:
        del fields["status"]

    selected = set(ids)
    edited = [
        dataclasses.replace(task, **fields) if task.index_id in selected else task
        for task in tasks
    ]
    if not completing:
        return edited, [], []

    updated, spawned, failed = complete_tasks(edited, tuple(ids), today)
    for index_id, _ in failed:
        pos = next(i for i, task in enumerate(tasks) if task.index_id == index_id)
        updated[pos] = tasks[pos]
    return updated, spawned, failed


def _describe(updates: dict[str, Any]) -> list[str]:
    changes = []
    for name, value in updates.items():
        if name == "recur" and not value:
            changes.append("recur → (cleared)")
        elif isinstance(value, date):
            changes.append(f"{name} → {value.isoformat()}")
        else:
            changes.append(f"{name} → {value}")
    return changes


@click.command("batch-update")
@click.option("--where", "-w", "where", required=True, help="Query selecting the tasks to update")
@click.option("--priority", "-p", default=None, help="Set priority (p1, p2, p3)")
@click.option(
    "--due",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Set due date (YYYY-MM-DD)",
)
@click.option("--area", default=None, help="Set area")
@click.option("--project", "project_id", default=None, help="Set project id")
@click.option("--estimate", type=click.IntRange(min=0), default=None, help="Set time estimate")
@click.option(
    "--status",
    type=click.Choice(sorted(TASK_STATUSES)),
    default=None,
    help="Set status; done also rolls recurring tasks forward",
)
@click.option("--recur", default=None, help="Set recurrence pattern (none to clear)")
@click.option(
    "--preview",
    is_flag=True,
    default=False,
    help="Show matching tasks and changes without writing the task file",
)
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Evaluate the query and recurrences as if today were this date",
)
@pass_context
def cli(
    ctx: Context,
    where: str,
    priority: str | None,
    due: datetime | None,
    area: str | None,
    project_id: str | None,
    estimate: int | None,
    status: str | None,
    recur: str | None,
    preview: bool,
    today: datetime | None,
) -> None:
    """Update all tasks matching a --where query.

    \b
    Examples:
      task-commander batch-update --where "status:open AND due:overdue" --status paused
      task-commander batch-update --where "area:home AND recur:set" --status done --preview
      task-commander batch-update --where "project_id:20260101T090000" --recur none
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_TASK_FILE_ERROR)

    updates: dict[str, Any] = {}
    if priority is not None:
        updates["priority"] = priority
    if due is not None:
        updates["due_date"] = due.date()
    if area is not None:
        updates["area"] = area
    if project_id is not None:
        updates["project_id"] = project_id
    if estimate is not None:
        updates["estimate"] = estimate
    if status is not None:
        updates["status"] = status
    if recur is not None:
        try:
            updates["recur"] = resolve_recur_option(recur)
        except RecurrencePatternError as e:
            error(f"Invalid recurrence pattern: {e}")
            raise SystemExit(EXIT_QUERY_ERROR)

    if not updates:
        error(
            "At least one field to update must be specified",
            hint="Use --priority, --due, --area, --project, --estimate, --status or --recur",
        )
        raise SystemExit(EXIT_QUERY_ERROR)

    try:
        parsed = parse_query(where)
    except QueryError as e:
        error(f"Invalid --where query: {e}")
        raise SystemExit(EXIT_QUERY_ERROR)

    verbose(f"Parsed query: {parsed}")

    try:
        tasks = load_tasks(config.tasks_file)
    except TaskStoreError as e:
        error(str(e))
        raise SystemExit(EXIT_TASK_FILE_ERROR)

    reference = today.date() if today is not None else date.today()
    matches = filter_tasks(parsed, tasks, config, today=reference)
    if not matches:
        info("No tasks match the query")
        raise SystemExit(EXIT_SUCCESS)

    if not ctx.quiet:
        info(f"Found {len(matches)} matching task(s):")
        for task in matches:
            click.echo(f"  {task.index_id}: {task.title}")
        info("Changes to apply:")
        for change in _describe(updates):
            click.echo(f"  • {change}")

    if preview:
        info("Preview mode: no changes applied")
        raise SystemExit(EXIT_SUCCESS)

    ids = [task.index_id for task in matches]
    updated, spawned, failed = apply_updates(tasks, ids, updates, reference)

    for index_id, reason in failed:
        error(f"Task {index_id} left unchanged: {reason}")

    if updated != tasks:
        try:
            save_tasks(config.tasks_file, updated)
        except OSError as e:
            error(f"Failed to write task file: {e}")
            raise SystemExit(EXIT_TASK_FILE_ERROR)

    if not ctx.quiet:
        for task in spawned:
            due_text = task.due_date.isoformat() if task.due_date else ""
            info(f"↻ Created recurring task ID {task.index_id}: {task.title} (due {due_text})")
        changed = sum(1 for old, new in zip(tasks, updated) if old != new)
        success(f"Updated {changed} task(s)")

    raise SystemExit(EXIT_RECURRENCE_ERROR if failed else EXIT_SUCCESS)
