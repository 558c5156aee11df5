"""Runner self-report contract.

A runner (claude, codex, ...) writes ``.overseer/state/runner_status.json``
inside its worktree at every milestone, replacing the whole file each time.
Overseer only reads it. A missing file is a normal state: the runner has not
reported yet.

Parsing and validation are separate steps. :func:`load` only checks that the
file is well-formed JSON of the expected shape; :func:`validate` enforces the
per-status required fields.
"""

from __future__ import annotations

import datetime as dt
import json
import os
import re
from pathlib import Path
from tempfile import NamedTemporaryFile

from pydantic import ValidationError

from . import paths
from .models import RUNNER_STATUS_SCHEMA_VERSION, RunnerState, RunnerStatus

INITIAL_SUMMARY = "Starting work"

_RFC3339 = re.compile(
    r"(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})"
)


class RunnerStatusError(RuntimeError):
    """Raised when a present self-report file cannot be read or parsed."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"{detail}: {path}")
        self.path = path
        self.detail = detail


class RunnerStatusValidationError(ValueError):
    """Raised when a self-report is missing a field its status requires."""


def status_path(worktree: Path) -> Path:
    """Return the self-report location for a worktree.

    Example:
        >>> status_path(Path("/path/to/worktree")).as_posix()
        '/path/to/worktree/.overseer/state/runner_status.json'
    """
    return paths.runner_status_path(worktree)


def _parse(path: Path, raw: str) -> RunnerStatus:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RunnerStatusError(path, f"failed to parse runner status file ({exc})") from exc
    if not isinstance(payload, dict):
        raise RunnerStatusError(path, "failed to parse runner status file (expected a JSON object)")
    try:
        return RunnerStatus.model_validate(payload)
    except ValidationError as exc:
        raise RunnerStatusError(path, f"failed to parse runner status file ({exc})") from exc


def load(worktree: Path) -> RunnerStatus | None:
    """Read and parse the self-report for a worktree.

    Args:
        worktree: Root of the run's worktree.

    Returns:
        The parsed report, or ``None`` when the file does not exist.

    Raises:
        RunnerStatusError: The file exists but cannot be read or parsed.
    """
    path = status_path(worktree)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        raise RunnerStatusError(path, f"failed to read runner status file ({exc})") from exc
    return _parse(path, raw)


def load_with_mod_time(worktree: Path) -> tuple[RunnerStatus | None, dt.datetime | None]:
    """Read the self-report together with the file's modification time.

    Returns:
        ``(report, mtime)`` with an aware UTC ``mtime``, or ``(None, None)``
        when the file does not exist.

    Raises:
        RunnerStatusError: The file exists but cannot be read or parsed.
    """
    path = status_path(worktree)
    try:
        stat = path.stat()
    except FileNotFoundError:
        return None, None
    except OSError as exc:
        raise RunnerStatusError(path, f"failed to stat runner status file ({exc})") from exc
    report = load(worktree)
    if report is None:
        # removed between stat and read
        return None, None
    mod_time = dt.datetime.fromtimestamp(stat.st_mtime, tz=dt.timezone.utc)
    return report, mod_time


def is_valid_status(value: object) -> bool:
    """Return whether ``value`` is one of the recognized runner states.

    Example:
        >>> is_valid_status("blocked"), is_valid_status("done"), is_valid_status("")
        (True, False, False)
    """
    if isinstance(value, RunnerState):
        return True
    if not isinstance(value, str):
        return False
    return value in {state.value for state in RunnerState}


def validate(report: RunnerStatus | None) -> None:
    """Check that a report carries the fields its status requires.

    Raises:
        RunnerStatusValidationError: Naming the first missing or invalid field.
    """
    if report is None:
        raise RunnerStatusValidationError("runner status is missing")
    if report.status == "":
        raise RunnerStatusValidationError("status is required")
    state = report.state
    if state is None:
        raise RunnerStatusValidationError(f"invalid status value: {report.status!r}")
    if report.summary == "":
        raise RunnerStatusValidationError("summary is required")
    if state is RunnerState.NEEDS_INPUT and not report.questions:
        raise RunnerStatusValidationError("questions[] is required when status is needs_input")
    if state is RunnerState.BLOCKED and not report.blockers:
        raise RunnerStatusValidationError("blockers[] is required when status is blocked")
    if state is RunnerState.READY_FOR_REVIEW and report.how_to_test == "":
        raise RunnerStatusValidationError(
            "how_to_test is required when status is ready_for_review"
        )


def parse_timestamp(value: str) -> dt.datetime | None:
    """Parse an RFC 3339 timestamp, returning ``None`` when it is not one.

    Example:
        >>> parse_timestamp("2026-01-19T12:00:00Z").isoformat()
        '2026-01-19T12:00:00+00:00'
        >>> parse_timestamp("2026-01-19T12:00:00") is None
        True
        >>> parse_timestamp("20260119T120000Z") is None
        True
    """
    match = _RFC3339.fullmatch(value)
    if match is None:
        return None
    # datetime carries microseconds; longer fractions are truncated.
    fraction = match["fraction"]
    text = match["base"] + (f".{fraction[:6].ljust(6, '0')}" if fraction else "")
    try:
        parsed = dt.datetime.fromisoformat(text + match["offset"])
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def age(report: RunnerStatus | None, now: dt.datetime | None = None) -> dt.timedelta:
    """Return how long ago the runner last updated its report.

    Staleness is best-effort: a missing report, an empty ``updated_at`` or an
    unparseable timestamp all yield a zero duration.
    """
    if report is None or not report.updated_at:
        return dt.timedelta(0)
    updated = parse_timestamp(report.updated_at)
    if updated is None:
        return dt.timedelta(0)
    current = now or dt.datetime.now(tz=dt.timezone.utc)
    return current - updated


def format_timestamp(value: dt.datetime) -> str:
    """Format an aware datetime as a second-precision UTC RFC 3339 string.

    Example:
        >>> format_timestamp(dt.datetime(2026, 1, 19, 12, 0, 5, 999, tzinfo=dt.timezone.utc))
        '2026-01-19T12:00:05Z'
    """
    utc = value.astimezone(dt.timezone.utc).replace(microsecond=0)
    return utc.isoformat().replace("+00:00", "Z")


def new_initial(now: dt.datetime | None = None) -> RunnerStatus:
    """Return the minimal valid report a freshly started runner writes."""
    current = now or dt.datetime.now(tz=dt.timezone.utc)
    return RunnerStatus(
        schema_version=RUNNER_STATUS_SCHEMA_VERSION,
        status=RunnerState.WORKING.value,
        updated_at=format_timestamp(current),
        summary=INITIAL_SUMMARY,
        questions=(),
        blockers=(),
        how_to_test="",
        risks=(),
    )


def write(worktree: Path, report: RunnerStatus) -> Path:
    """Replace the self-report file for a worktree.

    This is the runner-side half of the contract; the status engine never
    writes. The file is replaced atomically so readers never see a partial
    document.
    """
    path = status_path(worktree)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = report.model_dump(mode="json")
    temp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            "w",
            encoding="utf-8",
            delete=False,
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as handle:
            temp_path = Path(handle.name)
            json.dump(payload, handle, indent=2)
            handle.write("\n")
        os.replace(temp_path, path)
    finally:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink(missing_ok=True)
    return path
