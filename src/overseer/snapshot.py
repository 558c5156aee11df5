"""Assemble status-derivation snapshots from live local signals.

This is the I/O side of status derivation: it checks the worktree directory,
looks up the tmux session, reads the runner self-report and runs the stall
check, then hands a frozen :class:`~overseer.derive.Snapshot` to the pure
engine. A malformed self-report degrades to "no self-report" for this cycle
and never affects other runs.
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path

from . import log, paths, runner_status, watchdog
from .derive import Derived, Snapshot, derive
from .models import RunMeta
from .runner_status import RunnerStatusError, RunnerStatusValidationError


def worktree_present(path: str | Path | None) -> bool:
    """Return whether a worktree directory exists.

    Example:
        >>> worktree_present(None), worktree_present("")
        (False, False)
    """
    if path is None or str(path) == "":
        return False
    return Path(path).is_dir()


def session_name_for(meta: RunMeta, run_id: str | None = None) -> str:
    """Return the tmux session name recorded for a run, or the default one.

    ``run_id`` is the run's directory id. It names the default session and
    takes precedence over the id copied into the metadata record.

    Example:
        >>> session_name_for(RunMeta(), "r1")
        'overseer_r1'
        >>> session_name_for(RunMeta(tmux_session_name="custom"), "r1")
        'custom'
    """
    if meta.tmux_session_name:
        return meta.tmux_session_name
    return paths.default_tmux_session_name(run_id or meta.run_id or "")


def build_snapshot(
    meta: RunMeta | None,
    *,
    run_id: str | None = None,
    tmux_sessions: frozenset[str] | set[str],
    threshold: dt.timedelta = watchdog.DEFAULT_STALL_THRESHOLD,
    now: dt.datetime | None = None,
    strict: bool = False,
) -> Snapshot:
    """Gather the local signals for one run.

    Args:
        meta: Parsed metadata record, or ``None`` for a broken run.
        run_id: Directory id of the run; defaults to ``meta.run_id``.
        tmux_sessions: Live tmux session names (query once per poll).
        threshold: Stall threshold for the watchdog.
        now: Clock override for deterministic checks.
        strict: Drop self-reports that fail validation instead of passing
            them through.

    Returns:
        A snapshot ready for :func:`overseer.derive.derive`.
    """
    if meta is None:
        return Snapshot()
    label = run_id or meta.run_id or "<unknown>"
    present = worktree_present(meta.worktree_path)
    tmux_active = session_name_for(meta, run_id) in tmux_sessions

    report = None
    mod_time = None
    if present and meta.worktree_path:
        try:
            report, mod_time = runner_status.load_with_mod_time(Path(meta.worktree_path))
        except RunnerStatusError as exc:
            log.warning(f"ignoring runner status for {label}: {exc}")
    if report is not None and strict:
        try:
            runner_status.validate(report)
        except RunnerStatusValidationError as exc:
            log.debug(f"dropping invalid runner status for {label}: {exc}")
            report = None

    stall = watchdog.check_stall(
        watchdog.ActivitySignals(status_file_mod_time=mod_time, tmux_session_exists=tmux_active),
        threshold,
        now,
    )
    return Snapshot(
        tmux_active=tmux_active,
        worktree_present=present,
        runner_status=report,
        stall_result=stall,
    )


def observe(
    meta: RunMeta | None,
    *,
    run_id: str | None = None,
    tmux_sessions: frozenset[str] | set[str],
    threshold: dt.timedelta = watchdog.DEFAULT_STALL_THRESHOLD,
    now: dt.datetime | None = None,
    strict: bool = False,
) -> tuple[Snapshot, Derived]:
    """Build a snapshot for a run and derive its status."""
    snapshot = build_snapshot(
        meta,
        run_id=run_id,
        tmux_sessions=tmux_sessions,
        threshold=threshold,
        now=now,
        strict=strict,
    )
    return snapshot, derive(meta, snapshot)
