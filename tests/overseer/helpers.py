# ruff: noqa: E402

from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import overseer.paths as paths
from overseer.models import RunMeta, RunnerStatus

REPO_ID = "abcd1234ef567890"


def make_meta(**overrides: object) -> RunMeta:
    data: dict[str, object] = {
        "schema_version": "1.0",
        "run_id": "20260110-a3f2",
        "repo_id": REPO_ID,
        "name": "test run",
        "runner": "claude",
        "runner_cmd": "claude",
        "parent_branch": "main",
        "branch": "overseer/test-run-a3f2",
        "worktree_path": "/tmp/worktree",
        "created_at": "2026-01-10T12:00:00Z",
    }
    data.update(overrides)
    return RunMeta.model_validate(data)


def make_report(status: str, **overrides: object) -> RunnerStatus:
    data: dict[str, object] = {
        "schema_version": "1.0",
        "status": status,
        "updated_at": "2026-01-10T12:00:00Z",
        "summary": "Test summary",
        "questions": [],
        "blockers": [],
        "how_to_test": "Run tests",
        "risks": [],
    }
    data.update(overrides)
    return RunnerStatus.model_validate(data)


def write_report_payload(worktree: Path, payload: dict | str) -> Path:
    path = paths.runner_status_path(worktree)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = payload if isinstance(payload, str) else json.dumps(payload)
    path.write_text(text, encoding="utf-8")
    return path


def write_run(
    data_dir: Path,
    run_id: str,
    *,
    repo_id: str = REPO_ID,
    payload: dict | str | None = None,
) -> Path:
    run_dir = paths.run_dir(data_dir, repo_id, run_id)
    run_dir.mkdir(parents=True, exist_ok=True)
    if payload is not None:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        (run_dir / paths.RUN_META_FILENAME).write_text(text, encoding="utf-8")
    return run_dir
