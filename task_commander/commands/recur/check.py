"""Validate a recurrence pattern and print its canonical form."""

from __future__ import annotations

import click

from task_commander.commands.recur import EXIT_PATTERN_ERROR, EXIT_SUCCESS, cli
from task_commander.exceptions import RecurrencePatternError
from task_commander.recurrence import parse_pattern
from task_commander.utils.output import error


@cli.command("check")
@click.argument("pattern", nargs=-1, required=True)
def check(pattern: tuple[str, ...]) -> None:
    """Validate PATTERN and print its normalized form.

    \b
    Accepted patterns:
      daily, weekly, monthly, yearly
      every <N>d, every <N>w, every <N>m, every <N>y
      every <day>[,<day>...]   (monday or mon, ...)

    \b
    Examples:
      task-commander recur check "every 2w"
      task-commander recur check every mon,wed,fri
    """
    text = " ".join(pattern)
    try:
        normalized = parse_pattern(text)
    except RecurrencePatternError as e:
        error(str(e), hint=f"Offending part: {e.fragment!r}" if e.fragment else None)
        raise SystemExit(EXIT_PATTERN_ERROR)

    click.echo(normalized)
    raise SystemExit(EXIT_SUCCESS)
