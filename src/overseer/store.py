"""Read-only discovery of runs and their metadata records.

Runs live under ``<data_dir>/repos/<repo_id>/runs/<run_id>/meta.json``. The
directory names are the canonical identity; a run whose ``meta.json`` is
missing or invalid is still listed, flagged as broken.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import ValidationError

from . import log, paths
from .models import RunMeta


class RunMetaError(RuntimeError):
    """Raised when a run metadata record cannot be read or validated."""


class RunLookupError(LookupError):
    """Raised when a run reference matches no run or more than one."""


@dataclass(frozen=True)
class RunRecord:
    """A discovered run and its parsed metadata (``None`` when broken)."""

    repo_id: str
    run_id: str
    run_dir: Path
    meta: RunMeta | None
    error: str | None = None

    @property
    def broken(self) -> bool:
        return self.meta is None


def load_run_meta(path: Path) -> RunMeta:
    """Load and validate a ``meta.json`` file.

    Raises:
        RunMetaError: The file is missing, unreadable or invalid.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RunMetaError(f"failed to read run metadata at {path}: {exc}") from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RunMetaError(f"failed to parse run metadata at {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise RunMetaError(f"invalid run metadata at {path}: expected a JSON object")
    try:
        return RunMeta.model_validate(payload)
    except ValidationError as exc:
        raise RunMetaError(f"invalid run metadata at {path}:\n{exc}") from exc


def _sorted_dirs(parent: Path) -> list[Path]:
    try:
        entries = list(parent.iterdir())
    except FileNotFoundError:
        return []
    return sorted((entry for entry in entries if entry.is_dir()), key=lambda p: p.name)


def load_run(data_dir: Path, repo_id: str, run_id: str) -> RunRecord:
    """Load one run record, degrading metadata failures to a broken record."""
    run_dir = paths.run_dir(data_dir, repo_id, run_id)
    meta_path = paths.run_meta_path(data_dir, repo_id, run_id)
    try:
        meta = load_run_meta(meta_path)
    except RunMetaError as exc:
        log.debug(str(exc))
        return RunRecord(
            repo_id=repo_id, run_id=run_id, run_dir=run_dir, meta=None, error=str(exc)
        )
    return RunRecord(repo_id=repo_id, run_id=run_id, run_dir=run_dir, meta=meta)


def scan_all_runs(data_dir: Path) -> list[RunRecord]:
    """Discover every run under the data directory.

    Returns:
        Records sorted by repo id, then run id. A missing data directory
        yields an empty list.
    """
    records: list[RunRecord] = []
    for repo_dir in _sorted_dirs(paths.repos_dir(data_dir)):
        for run_dir in _sorted_dirs(repo_dir / paths.RUNS_DIRNAME):
            records.append(load_run(data_dir, repo_dir.name, run_dir.name))
    return records


def find_run(records: list[RunRecord], ref: str) -> RunRecord:
    """Resolve a run by exact id, then by unique id prefix or run name.

    Raises:
        RunLookupError: No run matches, or the reference is ambiguous.
    """
    ref = ref.strip()
    if not ref:
        raise RunLookupError("run reference is empty")
    exact = [record for record in records if record.run_id == ref]
    if len(exact) == 1:
        return exact[0]
    candidates = exact or [
        record
        for record in records
        if record.run_id.startswith(ref) or (record.meta is not None and record.meta.name == ref)
    ]
    if not candidates:
        raise RunLookupError(f"run not found: {ref}")
    if len(candidates) > 1:
        matches = ", ".join(f"{record.repo_id}/{record.run_id}" for record in candidates)
        raise RunLookupError(f"run reference {ref!r} is ambiguous: {matches}")
    return candidates[0]
