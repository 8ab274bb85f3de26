"""Filter tasks with the boolean query language."""

from __future__ import annotations

import io
import json
from datetime import date, datetime

import click
from rich.console import Console

from task_commander.cli import Context, pass_context
from task_commander.config import SORT_COLUMNS
from task_commander.exceptions import QueryError, TaskStoreError
from task_commander.models import STATUS_DONE, Task, is_due_within, is_overdue, priority_rank
from task_commander.query import filter_tasks, parse_query
from task_commander.store import load_tasks, task_to_dict
from task_commander.utils.output import (
    THEME,
    console,
    create_table,
    error,
    info,
    pager_print,
    verbose,
)

EXIT_SUCCESS = 0
EXIT_NO_RESULTS = 0
EXIT_QUERY_ERROR = 1
EXIT_TASK_FILE_ERROR = 2


def _sort_key(column: str):
    """Build a sort key for *column* that puts unset values last."""

    def key(task: Task) -> tuple:
        if column == "priority":
            return (0, priority_rank(task.priority))
        if column in ("due", "start"):
            value = task.due_date if column == "due" else task.start_date
            return (1, date.max) if value is None else (0, value)
        if column in ("title", "status"):
            value = getattr(task, column)
            return (1, "") if not value else (0, value.lower())
        return (0, task.index_id)

    return key


def sort_tasks(tasks: list[Task], sort_spec: str) -> list[Task]:
    """Sort tasks by a column name, ``-`` prefix for descending."""
    descending = sort_spec.startswith("-")
    column = sort_spec.lstrip("-")
    return sorted(tasks, key=_sort_key(column), reverse=descending)


def _due_markup(task: Task, today: date, soon_horizon: int) -> str:
    if task.due_date is None:
        return ""
    due = task.due_date.isoformat()
    if task.status == STATUS_DONE:
        return due
    if is_overdue(task.due_date, today):
        return f"[task.overdue]{due}[/task.overdue]"
    if is_due_within(task.due_date, today, soon_horizon):
        return f"[task.due_soon]{due}[/task.due_soon]"
    return due


def _priority_markup(priority: str) -> str:
    if priority.lower() in ("p1", "p2", "p3"):
        style = f"priority.{priority.lower()}"
        return f"[{style}]{priority}[/{style}]"
    return priority


def _print_table(tasks: list[Task], query_string: str, today: date, soon_horizon: int) -> None:
    """Print results as a Rich table, using pager when appropriate."""
    info(f"Query: {query_string} ({len(tasks)} results)")

    table = create_table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right", style="task.id")
    table.add_column("Pri", justify="left")
    table.add_column("Status", justify="left")
    table.add_column("Due", justify="left")
    table.add_column("Title", justify="left", style="task.title")
    table.add_column("Area", justify="left")
    table.add_column("Tags", justify="left")
    table.add_column("Recur", justify="left")

    for task in tasks:
        status = task.status
        if status == STATUS_DONE:
            status = f"[task.done]{status}[/task.done]"
        table.add_row(
            str(task.index_id),
            _priority_markup(task.priority),
            status,
            _due_markup(task, today, soon_horizon),
            task.title,
            task.area,
            ", ".join(task.tags),
            task.recur,
        )

    buf = io.StringIO()
    render_console = Console(
        file=buf,
        theme=THEME,
        force_terminal=not console.no_color,
        width=1000,
        no_color=console.no_color,
    )
    render_console.print(table)

    # Top border + header + header border
    pager_print(buf.getvalue(), header_lines=3)


def _print_json(tasks: list[Task]) -> None:
    """Print results as JSON, shaped like the task file."""
    click.echo(json.dumps({"tasks": [task_to_dict(t) for t in tasks], "count": len(tasks)}, indent=2))


@click.command("query")
@click.argument("query", nargs=-1, required=True)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json", "ids"]),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--sort",
    "-s",
    "sort_spec",
    default=None,
    help=f"Sort by column, prefix with - for descending. "
    f"Available: {', '.join(sorted(SORT_COLUMNS))}",
)
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=0),
    default=None,
    help="Limit number of results",
)
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Evaluate relative dates as if today were this date (YYYY-MM-DD)",
)
@pass_context
def cli(
    ctx: Context,
    query: tuple[str, ...],
    output_format: str,
    sort_spec: str | None,
    limit: int | None,
    today: datetime | None,
) -> None:
    """Select tasks matching a boolean filter query.

    QUERY arguments are joined with spaces.

    \b
    Syntax examples:
      task-commander query "status:open AND priority:p1"
      task-commander query "area:work AND (priority:p1 OR priority:p2)"
      task-commander query "due:soon AND NOT status:done"
      task-commander query 'title:"weekly review"'
      task-commander query "estimate>3 AND tag!=someday"

    \b
    Fields: status, priority, area, assignee, project_id, estimate,
            index_id, due, start, today, title, tag, recur, content
    Operators: : = != > <
    Special values (with ':'): empty, set; due: overdue, today, week, soon;
            today: tagged
    """
    config = ctx.config
    if config is None:
        error("Configuration not loaded")
        raise SystemExit(EXIT_TASK_FILE_ERROR)

    sort_spec = sort_spec or config.default_sort
    if sort_spec.lstrip("-") not in SORT_COLUMNS:
        error(
            f"Unknown sort column: {sort_spec.lstrip('-')}",
            hint=f"Available: {', '.join(sorted(SORT_COLUMNS))}",
        )
        raise SystemExit(EXIT_QUERY_ERROR)

    query_string = " ".join(query)

    try:
        parsed = parse_query(query_string)
    except QueryError as e:
        error(f"Invalid query: {e}")
        raise SystemExit(EXIT_QUERY_ERROR)

    verbose(f"Parsed query: {parsed}")

    try:
        tasks = load_tasks(config.tasks_file)
    except TaskStoreError as e:
        error(str(e), hint="Use --tasks or set paths.tasks_file in the config")
        raise SystemExit(EXIT_TASK_FILE_ERROR)

    reference = today.date() if today is not None else date.today()
    matches = sort_tasks(filter_tasks(parsed, tasks, config, today=reference), sort_spec)

    if limit is not None:
        matches = matches[:limit]

    if not matches:
        if output_format == "json":
            _print_json([])
        elif not ctx.quiet:
            info(f"No results for: {query_string}")
        raise SystemExit(EXIT_NO_RESULTS)

    if output_format == "table":
        _print_table(matches, query_string, reference, config.soon_horizon)
    elif output_format == "ids":
        for task in matches:
            click.echo(str(task.index_id))
    elif output_format == "json":
        _print_json(matches)

    raise SystemExit(EXIT_SUCCESS)
