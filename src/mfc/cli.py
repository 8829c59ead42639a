"""Command line interface for mfc."""

from __future__ import annotations

import json
import logging
import shlex
import sys
from typing import NoReturn

import click
from colorama import init, Fore, Style

from mfc import __version__
from mfc.config import LOG_FORMAT
from mfc.errors import CronError
from mfc.manager import SystemCronManager, get_manager
from mfc.models import ScheduleSpec

init(autoreset=True)


def get_cron_manager() -> SystemCronManager:
    return get_manager()


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.ERROR,
        format=LOG_FORMAT,
    )


def fail(message: str) -> NoReturn:
    click.echo(f"{Fore.RED}Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="mfc")
@click.option("--verbose", "-v", is_flag=True, help="Log subprocess activity")
def cli(verbose: bool) -> None:
    """Personal command-line assistant."""
    setup_logging(verbose)


@cli.group(invoke_without_command=True)
@click.pass_context
def cron(ctx: click.Context) -> None:
    """Manage scheduled tasks interactively or via subcommands.

    Run `mfc cron` without a subcommand to enter interactive mode, then type
    `list`, `add` or `delete` (with their usual arguments), `help`, or `q` to
    exit.

    \b
    Examples:
      mfc cron list
      mfc cron add "backup files" --schedule every:30m
      mfc cron add "check updates" --on-startup
      mfc cron delete
    """
    if ctx.invoked_subcommand is None:
        interactive(ctx)


def stdin_is_interactive() -> bool:
    return sys.stdin.isatty()


def interactive(ctx: click.Context) -> None:
    if not stdin_is_interactive():
        click.echo(f"{Fore.RED}Interactive mode is not supported in non-interactive terminals.", err=True)
        return

    names = ", ".join(cron.commands)
    click.echo(f"{Fore.CYAN}Entering interactive cron mode. Type commands like {names}, or 'q' to exit.")

    while True:
        try:
            line = click.prompt(f"{Fore.CYAN}Enter a command{Style.RESET_ALL}", default="", show_default=False)
        except click.Abort:
            break

        line = line.strip()
        if line.lower() in ("q", "exit"):
            click.echo(f"{Fore.GREEN}Exiting interactive cron mode.")
            break
        if not line:
            continue

        try:
            args = shlex.split(line)
        except ValueError as e:
            click.echo(f"{Fore.YELLOW}Could not read command: {e}")
            continue

        if args[0] == "help":
            click.echo(ctx.get_help())
        elif args[0] in cron.commands:
            try:
                cron.main(args=args, prog_name="mfc cron", standalone_mode=False)
            except click.ClickException as e:
                e.show()
            except SystemExit:
                pass
        else:
            click.echo(f"{Fore.RED}Unknown command: {args[0]}")


@cron.command("list")
@click.option("--json", "-j", "output_json", is_flag=True, help="Output as JSON")
def list_command(output_json: bool) -> None:
    """List all scheduled tasks."""
    try:
        manager = get_cron_manager()
        result = manager.list_parsed()
    except CronError as e:
        fail(f"Failed to retrieve tasks: {e}")

    for warning in result.warnings:
        color = Fore.YELLOW if warning.informational else Fore.RED
        click.echo(f"{color}{warning}", err=True)

    if output_json:
        click.echo(json.dumps([t.to_dict() for t in result.tasks], indent=2, ensure_ascii=False))
        return

    if not result.tasks:
        click.echo(f"{Style.DIM}No scheduled tasks found.")
        return

    click.echo(f"{Fore.GREEN}Scheduled tasks:")
    click.echo(manager.render(result.tasks))


@cron.command("add")
@click.argument("command")
@click.option("--schedule", "-s", default=None, help="Schedule as every:<duration> (e.g. 'every:5m' for every 5 minutes)")
@click.option("--on-startup/--no-startup", default=False, help="Run the task at system startup")
@click.option("--name", "-n", default=None, help="Task name (Windows only, defaults to the command)")
def add_command(command: str, schedule: str | None, on_startup: bool, name: str | None) -> None:
    """Add a scheduled task."""
    try:
        spec = ScheduleSpec.parse(schedule) if schedule else None
    except CronError as e:
        fail(f"Failed to add task: {e}")

    if spec is not None and spec.is_sub_minute:
        click.echo(f"{Fore.YELLOW}Warning: '{schedule}' is shorter than one minute; the entry will use a zero interval.", err=True)

    try:
        get_cron_manager().add_task(command, spec, on_startup=on_startup, name=name)
    except CronError as e:
        fail(f"Failed to add task: {e}")

    if on_startup and spec is None:
        click.echo(f"{Fore.GREEN}✓ Added startup-only task: {command}")
    elif on_startup:
        click.echo(f"{Fore.GREEN}✓ Added startup task: {command} with schedule: {schedule}")
    else:
        click.echo(f"{Fore.GREEN}✓ Added task: {command} with schedule: {schedule}")


@cron.command("delete")
@click.argument("name", required=False)
def delete_command(name: str | None) -> None:
    """Delete a scheduled task.

    Without NAME, pick the task from a numbered list. On Unix-like systems
    every crontab line containing NAME is removed.
    """
    try:
        manager = get_cron_manager()
        if name is None:
            name = select_task(manager.deletion_candidates())
            if name is None:
                return
        manager.delete_task(name)
    except CronError as e:
        fail(f"Failed to delete task: {e}")

    click.echo(f"{Fore.GREEN}✓ Deleted task: {name}")


def select_task(choices: list[str]) -> str | None:
    if not choices:
        click.echo(f"{Style.DIM}No tasks found.")
        return None

    click.echo(f"{Fore.CYAN}Select a task to delete:")
    for index, choice in enumerate(choices, start=1):
        click.echo(f"  {index}) {choice}")
    click.echo("  0) None")

    picked = click.prompt("Task number", type=click.IntRange(0, len(choices)), default=0)
    if picked == 0:
        click.echo(f"{Style.DIM}No valid selection made.")
        return None
    return choices[picked - 1]


def main() -> None:
    cli()
