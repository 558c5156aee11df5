"""Typer entry point for the ``overseer`` command."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import typer

from . import __version__
from . import log as overseer_log
from .commands import init_report as report_init_cmd
from .commands import list_runs as list_cmd
from .commands import show_run as show_cmd
from .commands import validate_report as report_validate_cmd

app = typer.Typer(
    name="overseer",
    help="Derive a single status label for long-running AI coding runs.",
    no_args_is_help=True,
    add_completion=False,
)
report_app = typer.Typer(help="Inspect or seed runner self-report files.", no_args_is_help=True)
app.add_typer(report_app, name="report")

_DATA_DIR_HELP = "run data directory (default: $OVERSEER_DATA_DIR or the platform data dir)"
_STALL_HELP = "seconds without a self-report update before a live run is stalled"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _log_level_callback(value: str | None) -> str | None:
    if value is None:
        return None
    level = overseer_log.parse_level(value)
    if level is None:
        raise typer.BadParameter("expected one of: " + ", ".join(overseer_log.LEVEL_NAMES))
    return level.name.lower()


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        callback=_log_level_callback,
        help="log level (trace|debug|info|success|warning|error)",
    ),
    no_color: bool = typer.Option(False, "--no-color", help="disable colorized output"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="show the version and exit",
    ),
) -> None:
    """Overseer status commands."""
    if log_level is not None:
        overseer_log.set_level(log_level)
    if no_color:
        overseer_log.set_no_color(True)


@app.command("ls")
def ls(
    all_runs: bool = typer.Option(False, "--all", "-a", help="include archived runs"),
    json_output: bool = typer.Option(False, "--json", help="emit JSON"),
    strict: bool = typer.Option(
        False, "--strict", help="ignore runner self-reports that fail validation"
    ),
    data_dir: Path | None = typer.Option(None, "--data-dir", help=_DATA_DIR_HELP),
    stall_threshold: int | None = typer.Option(None, "--stall-threshold", help=_STALL_HELP),
) -> None:
    """List runs with their derived status."""
    list_cmd(
        SimpleNamespace(
            all=all_runs,
            json=json_output,
            strict=strict,
            data_dir=data_dir,
            stall_threshold=stall_threshold,
        )
    )


@app.command("show")
def show(
    run: str = typer.Argument(..., help="run id, unique run id prefix, or run name"),
    json_output: bool = typer.Option(False, "--json", help="emit JSON"),
    strict: bool = typer.Option(
        False, "--strict", help="ignore runner self-reports that fail validation"
    ),
    data_dir: Path | None = typer.Option(None, "--data-dir", help=_DATA_DIR_HELP),
    stall_threshold: int | None = typer.Option(None, "--stall-threshold", help=_STALL_HELP),
) -> None:
    """Show the derived status and its inputs for one run."""
    show_cmd(
        SimpleNamespace(
            run=run,
            json=json_output,
            strict=strict,
            data_dir=data_dir,
            stall_threshold=stall_threshold,
        )
    )


@report_app.command("validate")
def report_validate(
    worktree: Path = typer.Argument(Path("."), help="run worktree containing .overseer/state"),
) -> None:
    """Load and validate a runner self-report."""
    report_validate_cmd(SimpleNamespace(worktree=worktree))


@report_app.command("init")
def report_init(
    worktree: Path = typer.Argument(Path("."), help="run worktree containing .overseer/state"),
    force: bool = typer.Option(False, "--force", help="replace an existing self-report"),
) -> None:
    """Write the initial working self-report."""
    report_init_cmd(SimpleNamespace(worktree=worktree, force=force))


if __name__ == "__main__":
    app()
