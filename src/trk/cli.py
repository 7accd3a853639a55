"""CLI entry point for trk."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from trk.config import Config, RecorderKind, load_config
from trk.core.hook import PostCheckoutHook
from trk.core.recorder import (
    BranchVisitRecorder,
    CommandRecorder,
    RecorderError,
    TimesheetRecorder,
)
from trk.core.timesheet import TimesheetError, TimesheetStore
from trk.models.visit import HookStatus

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr, DEBUG when verbose and WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def get_store(config: Config, repo_path: Optional[Path] = None) -> TimesheetStore:
    """Get the TimesheetStore of the repository containing repo_path."""
    return TimesheetStore.for_repository(repo_path, config.storage)


def build_recorder(config: Config, repo_path: Optional[Path] = None) -> BranchVisitRecorder:
    """
    Build the recorder selected by ``hook.recorder``.

    Args:
        config: Loaded configuration.
        repo_path: Repository the timesheet recorder writes into.

    Returns:
        A BranchVisitRecorder.
    """
    if config.hook.recorder == RecorderKind.COMMAND:
        if not config.hook.command_available():
            logger.warning(f"'{config.hook.command}' is not on PATH")
        return CommandRecorder(config.hook.command, config.hook.timeout_seconds)
    return TimesheetRecorder(get_store(config, repo_path))


@click.group()
@click.version_option(package_name="trk")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to a TOML config file.",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Log what trk is doing to stderr.",
)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], verbose: bool) -> None:
    """trk - track which branches you work on.

    Install scripts/post-checkout as .git/hooks/post-checkout to record
    every branch checkout in the repository timesheet.
    """
    configure_logging(verbose)
    ctx.obj = load_config(str(config_path) if config_path else None)


@main.command("init")
@click.argument("name", required=False)
@click.pass_obj
def init_timesheet(config: Config, name: Optional[str]) -> None:
    """Create the timesheet for this repository.

    NAME defaults to git's user.name.

    Example:
        trk init
        trk init "Ada Lovelace"
    """
    store = get_store(config)
    try:
        sheet = store.init(name)
    except TimesheetError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[bold green]Timesheet initialized[/bold green] for {sheet.user}")
    console.print(f"[dim]{store.path}[/dim]")


@main.command("begin")
@click.pass_obj
def begin_session(config: Config) -> None:
    """Begin a new work session.

    Branches checked out while the session runs are attached to it.
    """
    try:
        session = get_store(config).begin_session()
    except TimesheetError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[green]Session started[/green] at {session.start:%Y-%m-%d %H:%M}")


@main.command("end")
@click.pass_obj
def end_session(config: Config) -> None:
    """End the running work session."""
    try:
        session = get_store(config).end_session()
    except TimesheetError as e:
        raise click.ClickException(str(e)) from e

    branches = ", ".join(sorted(session.branches)) or "none"
    console.print(f"[green]Session ended[/green] at {session.end:%Y-%m-%d %H:%M}")
    console.print(f"[bold]Branches:[/bold] {branches}")


@main.command("branch")
@click.argument("branch_name")
@click.pass_obj
def record_branch(config: Config, branch_name: str) -> None:
    """Record that BRANCH_NAME was just checked out.

    This is the command the post-checkout hook calls.

    Example:
        trk branch feature/login
    """
    recorder = TimesheetRecorder(get_store(config))
    try:
        recorder.record_visit(branch_name)
    except RecorderError as e:
        raise click.ClickException(str(e)) from e


@main.group("hook")
def hook_group() -> None:
    """Entry points for git hooks."""


@hook_group.command("post-checkout")
@click.argument("previous_ref")
@click.argument("new_ref")
@click.argument("flag")
@click.pass_context
def post_checkout(ctx: click.Context, previous_ref: str, new_ref: str, flag: str) -> None:
    """Handle git's post-checkout hook.

    Records the checked-out branch when FLAG is 1 and HEAD is on a branch.
    Exits 1 without output on a detached HEAD.
    """
    hook = PostCheckoutHook(build_recorder(ctx.obj))
    outcome = hook.handle(previous_ref, new_ref, flag)

    if outcome.status == HookStatus.FAILED:
        err_console.print(
            f"trk: {outcome.error}", style="red", markup=False, highlight=False, soft_wrap=True
        )

    ctx.exit(outcome.exit_code)


if __name__ == "__main__":
    main()
