"""Implementation for the ``overseer report`` commands."""

from __future__ import annotations

from pathlib import Path

from .. import log, render, runner_status
from ..io import die, say


def validate_report(args: object) -> None:
    """Load and validate the self-report in a worktree.

    Exits non-zero when the file is missing, malformed or invalid.

    Example:
        $ overseer report validate ~/src/repo-wt
    """
    worktree = Path(str(getattr(args, "worktree", ".") or "."))
    path = runner_status.status_path(worktree)
    try:
        report = runner_status.load(worktree)
    except runner_status.RunnerStatusError as exc:
        die(str(exc))
    if report is None:
        die(f"no runner status file at {path}")
    try:
        runner_status.validate(report)
    except runner_status.RunnerStatusValidationError as exc:
        die(f"invalid runner status at {path}: {exc}")
    log.success(f"valid runner status: {report.status}")
    say(f"summary: {report.summary}")
    if report.updated_at:
        say(f"updated: {render.format_duration(runner_status.age(report))} ago")


def init_report(args: object) -> None:
    """Write the initial ``working`` self-report into a worktree.

    Refuses to overwrite an existing report unless ``force`` is set.
    """
    worktree = Path(str(getattr(args, "worktree", ".") or "."))
    if not worktree.is_dir():
        die(f"worktree not found: {worktree}")
    path = runner_status.status_path(worktree)
    if path.exists() and not getattr(args, "force", False):
        die(f"runner status already exists at {path} (use --force to replace it)")
    written = runner_status.write(worktree, runner_status.new_initial())
    log.success(f"wrote {written}")
