"""Recurrence pattern commands."""

from __future__ import annotations

import click

# Exit codes
EXIT_SUCCESS = 0
EXIT_PATTERN_ERROR = 1
EXIT_TASK_FILE_ERROR = 2
EXIT_COMPUTATION_ERROR = 3


@click.group("recur")
def cli() -> None:
    """Recurrence pattern commands.

    Validate repeat patterns, attach them to tasks, and preview the
    dates a recurring task will be due on.
    """
    pass


# Import submodules to register their commands with the cli group
from task_commander.commands.recur import assign as _assign  # noqa: E402, F401
from task_commander.commands.recur import check as _check  # noqa: E402, F401
from task_commander.commands.recur import upcoming as _upcoming  # noqa: E402, F401
