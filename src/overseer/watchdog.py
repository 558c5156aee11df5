"""Stall detection for runs.

A run is stalled when its tmux session is still alive but the runner has not
touched its self-report file within the threshold. Runs without a self-report
file are never considered stalled.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

DEFAULT_STALL_THRESHOLD = dt.timedelta(minutes=15)


@dataclass(frozen=True)
class ActivitySignals:
    """Signals used to decide whether a run is stalled."""

    status_file_mod_time: dt.datetime | None
    tmux_session_exists: bool


@dataclass(frozen=True)
class StallResult:
    """Outcome of a stall check.

    ``is_stalled`` is authoritative; ``stalled_duration`` is informational and
    only meaningful when the run is stalled.
    """

    is_stalled: bool
    stalled_duration: dt.timedelta = dt.timedelta(0)


NOT_STALLED = StallResult(is_stalled=False)


def check_stall(
    signals: ActivitySignals,
    threshold: dt.timedelta,
    now: dt.datetime | None = None,
) -> StallResult:
    """Decide whether a run is stalled.

    Example:
        >>> now = dt.datetime(2026, 1, 10, 12, 30, tzinfo=dt.timezone.utc)
        >>> signals = ActivitySignals(now - dt.timedelta(minutes=20), True)
        >>> check_stall(signals, DEFAULT_STALL_THRESHOLD, now).is_stalled
        True
    """
    if not signals.tmux_session_exists:
        return NOT_STALLED
    if signals.status_file_mod_time is None:
        return NOT_STALLED
    current = now or dt.datetime.now(tz=dt.timezone.utc)
    stalled_duration = current - signals.status_file_mod_time
    if stalled_duration >= threshold:
        return StallResult(is_stalled=True, stalled_duration=stalled_duration)
    return NOT_STALLED


def check_stall_with_default(
    signals: ActivitySignals, now: dt.datetime | None = None
) -> StallResult:
    """Run :func:`check_stall` with :data:`DEFAULT_STALL_THRESHOLD`."""
    return check_stall(signals, DEFAULT_STALL_THRESHOLD, now)
