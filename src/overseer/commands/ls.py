"""Implementation for the ``overseer ls`` command."""

from __future__ import annotations

import datetime as dt
import json

from rich import box
from rich.table import Table
from rich.text import Text

from .. import log, render, tmux
from ..io import say
from ..snapshot import observe
from ..store import scan_all_runs
from .resolve import resolve_settings


def list_runs(args: object) -> None:
    """List runs with their derived status.

    Args:
        args: CLI argument object with ``all``, ``json`` and ``strict`` flags.

    Returns:
        None.

    Example:
        $ overseer ls --all
    """
    settings = resolve_settings(args)
    include_archived = bool(getattr(args, "all", False))
    strict = bool(getattr(args, "strict", False))
    now = dt.datetime.now(tz=dt.timezone.utc)

    records = scan_all_runs(settings.data_dir.value)
    sessions = tmux.list_sessions()
    log.debug(f"found {len(records)} run(s), {len(sessions)} tmux session(s)")

    rows = []
    for record in records:
        snapshot, derived = observe(
            record.meta,
            run_id=record.run_id,
            tmux_sessions=sessions,
            threshold=settings.stall_threshold.value,
            now=now,
            strict=strict,
        )
        if derived.archived and not include_archived:
            continue
        rows.append((record, snapshot, derived))

    if getattr(args, "json", False):
        payload = [
            render.run_payload(record, snapshot, derived, now=now)
            for record, snapshot, derived in rows
        ]
        say(json.dumps(payload, indent=2))
        return

    if not rows:
        if include_archived:
            say("no runs found")
        else:
            say("no active runs (use --all to include archived)")
        return

    table = Table(box=box.SIMPLE)
    table.add_column("Run", no_wrap=True)
    table.add_column("Name", overflow="fold")
    table.add_column("Runner", no_wrap=True)
    table.add_column("Created", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    for record, _snapshot, derived in rows:
        table.add_row(
            record.run_id,
            Text(render.display_name(record)),
            Text((record.meta.runner or "") if record.meta else ""),
            Text(render.format_created(record, now)),
            Text(render.format_status(derived), style=render.status_style(derived)),
        )
    log.console().print(table)
