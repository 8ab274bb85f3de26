"""Command-line interface for task-commander."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click

from task_commander import __version__
from task_commander.config import Config, load_config
from task_commander.utils.output import (
    error,
    set_color,
    set_pager,
    set_verbosity,
    warning,
)


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config | None = None
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False
        self.pager: bool | None = None  # None = auto


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/task-commander/config.toml)",
)
@click.option(
    "--tasks",
    "-t",
    "tasks_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the JSON task file (overrides config)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.option(
    "--pager/--no-pager",
    default=None,
    help="Force pager on/off (default: auto-detect)",
)
@click.version_option(version=__version__, prog_name="task-commander")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    tasks_file: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
    pager: bool | None,
) -> None:
    """task-commander: Filter and complete tasks kept in plain files.

    Select tasks with boolean queries such as
    "status:open AND (priority:p1 OR priority:p2)" and keep recurring
    tasks (daily, every 2w, every mon,wed,fri) rolling forward.

    Configuration is loaded from ~/.config/task-commander/config.toml by default.
    Use --config to specify an alternative configuration file.

    Examples:

        # Open high-priority work
        task-commander query "area:work AND priority:p1 AND NOT status:done"

        # Check a recurrence pattern
        task-commander recur check "every mon,wed,fri"
    """
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet
    app_ctx.pager = pager

    set_verbosity(verbose=verbose, debug=debug)
    set_pager(pager)

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    # Configure color output: disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None

    if disable_color:
        set_color(False)

    try:
        loaded_config, warnings = load_config(config)
        app_ctx.config = loaded_config

        if tasks_file is not None:
            loaded_config.tasks_file = tasks_file.expanduser().resolve()

        if not disable_color and not loaded_config.colored_output:
            set_color(False)

        if not quiet:
            for warn in warnings:
                # The task file warning is stale once --tasks overrides it
                if tasks_file is not None and warn.startswith("Task file not found"):
                    continue
                warning(warn)

    except Exception as e:
        error(str(e))
        ctx.exit(1)


@cli.command("help")
@click.argument("command", required=False, nargs=-1)
@click.pass_context
def help_cmd(ctx: click.Context, command: tuple[str, ...]) -> None:
    """Show help for a command."""
    group = cli
    for name in command:
        cmd = group.get_command(ctx, name)
        if cmd is None:
            error(f"Unknown command: {name}")
            ctx.exit(1)
            return
        if isinstance(cmd, click.Group):
            group = cmd
        else:
            click.echo(cmd.get_help(ctx))
            return
    click.echo(group.get_help(ctx))


def register_commands() -> None:
    """Register all commands from the commands package."""
    from task_commander.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


# Register commands on import
register_commands()
