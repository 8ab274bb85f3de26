"""Preview the upcoming due dates of a recurrence pattern."""

from __future__ import annotations

from datetime import date, datetime

import click

from task_commander.commands.recur import (
    EXIT_COMPUTATION_ERROR,
    EXIT_PATTERN_ERROR,
    EXIT_SUCCESS,
    cli,
)
from task_commander.exceptions import RecurrenceComputationError, RecurrencePatternError
from task_commander.recurrence import parse_pattern, upcoming_occurrences
from task_commander.utils.output import error, verbose


@cli.command("next")
@click.argument("pattern")
@click.argument("due", type=click.DateTime(formats=["%Y-%m-%d"]))
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Compute as if today were this date (YYYY-MM-DD)",
)
@click.option(
    "--count",
    "-n",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of occurrences to show",
)
def upcoming(pattern: str, due: datetime, today: datetime | None, count: int) -> None:
    """Show the next due date(s) of PATTERN after DUE.

    DUE is the current due date (YYYY-MM-DD). Occurrences never fall
    before today, so a long-overdue task skips every missed period.

    \b
    Examples:
      task-commander recur next monthly 2026-01-31
      task-commander recur next "every mon,thu" 2026-10-12 -n 4
    """
    try:
        normalized = parse_pattern(pattern)
    except RecurrencePatternError as e:
        error(str(e))
        raise SystemExit(EXIT_PATTERN_ERROR)

    reference = today.date() if today is not None else date.today()
    verbose(f"Pattern {normalized!r}, due {due.date().isoformat()}, today {reference.isoformat()}")

    try:
        dates = upcoming_occurrences(normalized, due.date(), count, reference)
    except RecurrenceComputationError as e:
        error(str(e))
        raise SystemExit(EXIT_COMPUTATION_ERROR)

    for occurrence in dates:
        click.echo(occurrence.isoformat())
    raise SystemExit(EXIT_SUCCESS)
