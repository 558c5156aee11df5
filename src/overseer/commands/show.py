"""Implementation for the ``overseer show`` command."""

from __future__ import annotations

import datetime as dt
import json

from rich import box
from rich.table import Table
from rich.text import Text

from .. import log, render, runner_status, tmux
from ..io import say
from ..snapshot import observe
from .resolve import resolve_run, resolve_settings


def _display(value: object) -> Text:
    if value is None or value == "":
        return Text("-")
    return Text(str(value))


def show_run(args: object) -> None:
    """Show the derived status and its inputs for one run.

    Args:
        args: CLI argument object with ``run`` and ``json``.

    Returns:
        None.

    Example:
        $ overseer show 20260110-a3f2
    """
    settings = resolve_settings(args)
    record = resolve_run(settings, str(getattr(args, "run", "") or ""))
    now = dt.datetime.now(tz=dt.timezone.utc)
    snapshot, derived = observe(
        record.meta,
        run_id=record.run_id,
        tmux_sessions=tmux.list_sessions(),
        threshold=settings.stall_threshold.value,
        now=now,
        strict=bool(getattr(args, "strict", False)),
    )

    if getattr(args, "json", False):
        say(json.dumps(render.run_payload(record, snapshot, derived, now=now), indent=2))
        return

    if record.broken:
        log.warning(f"run metadata is unreadable: {record.error or record.run_dir}")
    if record.meta is not None and not snapshot.worktree_present:
        log.warning(f"worktree missing: {record.meta.worktree_path or '-'}")

    meta = record.meta
    table = Table(title=f"Run {record.run_id}", box=box.SIMPLE, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_row("Repo", Text(record.repo_id))
    table.add_row("Name", _display(render.display_name(record)))
    table.add_row("Runner", _display(meta.runner if meta else None))
    table.add_row("Branch", _display(meta.branch if meta else None))
    table.add_row("Worktree", _display(meta.worktree_path if meta else None))
    table.add_row("Created", _display(render.format_created(record, now)))
    table.add_row(
        "Status", Text(render.format_status(derived), style=render.status_style(derived))
    )
    table.add_row("tmux", "active" if snapshot.tmux_active else "inactive")

    report = snapshot.runner_status
    if report is not None:
        table.add_row("Runner status", _display(report.status))
        table.add_row("Summary", _display(report.summary))
        table.add_row("Updated", render.format_duration(runner_status.age(report, now)) + " ago")
        if report.questions:
            table.add_row("Questions", _display("\n".join(report.questions)))
        if report.blockers:
            table.add_row("Blockers", _display("\n".join(report.blockers)))
        if report.how_to_test:
            table.add_row("How to test", _display(report.how_to_test))
        if report.risks:
            table.add_row("Risks", _display("\n".join(report.risks)))
    stall = snapshot.stall_result
    if stall is not None and stall.is_stalled:
        table.add_row("Stalled for", render.format_duration(stall.stalled_duration))
    log.console().print(table)
