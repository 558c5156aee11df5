"""Display helpers for derived run status."""

from __future__ import annotations

import datetime as dt

from .derive import Derived, DerivedStatus, Snapshot
from .runner_status import age, parse_timestamp
from .store import RunRecord

NAME_MAX_LEN = 50
NAME_BROKEN = "<broken>"
NAME_UNTITLED = "<untitled>"
ARCHIVED_SUFFIX = " (archived)"

_STATUS_STYLES = {
    DerivedStatus.BROKEN: "bold red",
    DerivedStatus.MERGED: "magenta",
    DerivedStatus.ABANDONED: "dim",
    DerivedStatus.FAILED: "red",
    DerivedStatus.NEEDS_ATTENTION: "bold yellow",
    DerivedStatus.READY_FOR_REVIEW: "bold green",
    DerivedStatus.NEEDS_INPUT: "bold yellow",
    DerivedStatus.BLOCKED: "yellow",
    DerivedStatus.WORKING: "cyan",
    DerivedStatus.STALLED: "yellow",
    DerivedStatus.ACTIVE: "cyan",
    DerivedStatus.IDLE: "dim",
}


def format_status(derived: Derived) -> str:
    """Return the status label with an archived suffix when applicable.

    Example:
        >>> format_status(Derived(status=DerivedStatus.MERGED, archived=True))
        'merged (archived)'
    """
    if derived.archived:
        return derived.derived_status + ARCHIVED_SUFFIX
    return derived.derived_status


def status_style(derived: Derived) -> str:
    """Return the rich style used for a derived status."""
    if derived.archived:
        return "dim"
    return _STATUS_STYLES.get(derived.status, "")


def truncate(text: str, max_len: int = NAME_MAX_LEN) -> str:
    """Truncate text to ``max_len`` characters with an ellipsis.

    Example:
        >>> truncate("abcdef", 4)
        'abc…'
    """
    if len(text) <= max_len:
        return text
    return text[: max_len - 1] + "…"


def display_name(record: RunRecord) -> str:
    if record.meta is None:
        return NAME_BROKEN
    if not record.meta.name:
        return NAME_UNTITLED
    return truncate(record.meta.name)


def _plural(count: int, unit: str) -> str:
    return f"1 {unit} ago" if count == 1 else f"{count} {unit}s ago"


def format_relative_time(value: dt.datetime, now: dt.datetime) -> str:
    """Format a timestamp relative to ``now``.

    Example:
        >>> now = dt.datetime(2026, 1, 10, 12, 0, tzinfo=dt.timezone.utc)
        >>> format_relative_time(now - dt.timedelta(minutes=5), now)
        '5 mins ago'
    """
    diff = abs(now - value)
    if diff < dt.timedelta(minutes=1):
        return "just now"
    if diff < dt.timedelta(hours=1):
        return _plural(int(diff.total_seconds() // 60), "min")
    if diff < dt.timedelta(days=1):
        return _plural(int(diff.total_seconds() // 3600), "hour")
    if diff < dt.timedelta(days=7):
        return _plural(diff.days, "day")
    if diff < dt.timedelta(days=30):
        return _plural(diff.days // 7, "week")
    return value.strftime("%Y-%m-%d")


def format_duration(value: dt.timedelta) -> str:
    """Format a duration compactly.

    Example:
        >>> format_duration(dt.timedelta(hours=1, minutes=5, seconds=3))
        '1h5m'
        >>> format_duration(dt.timedelta(seconds=42))
        '42s'
    """
    seconds = max(int(value.total_seconds()), 0)
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours:
        return f"{hours}h{minutes}m"
    if minutes:
        return f"{minutes}m{seconds}s"
    return f"{seconds}s"


def format_created(record: RunRecord, now: dt.datetime) -> str:
    if record.meta is None or not record.meta.created_at:
        return ""
    created = parse_timestamp(record.meta.created_at)
    if created is None:
        return record.meta.created_at
    return format_relative_time(created, now)


def run_payload(
    record: RunRecord, snapshot: Snapshot, derived: Derived, *, now: dt.datetime
) -> dict[str, object]:
    """Build the JSON payload describing one run's status."""
    meta = record.meta
    report = snapshot.runner_status
    stall = snapshot.stall_result
    payload: dict[str, object] = {
        "repo_id": record.repo_id,
        "run_id": record.run_id,
        "name": meta.name if meta else None,
        "runner": meta.runner if meta else None,
        "branch": meta.branch if meta else None,
        "worktree_path": meta.worktree_path if meta else None,
        "created_at": meta.created_at if meta else None,
        "broken": record.broken,
        "derived_status": derived.derived_status,
        "archived": derived.archived,
        "tmux_active": snapshot.tmux_active,
        "worktree_present": snapshot.worktree_present,
        "runner_status": None,
        "stall": None,
    }
    if report is not None:
        payload["runner_status"] = {
            **report.model_dump(mode="json"),
            "age_seconds": int(age(report, now).total_seconds()),
        }
    if stall is not None:
        payload["stall"] = {
            "is_stalled": stall.is_stalled,
            "stalled_duration_seconds": int(stall.stalled_duration.total_seconds()),
        }
    if record.error:
        payload["error"] = record.error
    return payload
