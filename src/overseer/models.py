"""Pydantic models for run metadata and runner self-reports.

Both payloads are JSON documents written by other processes. The models are
lenient about shape (``null`` and missing keys read as empty values, unknown
keys are ignored) and strict about types, so a structurally broken file fails
validation while an older or newer writer still parses.

Example:
    >>> report = RunnerStatus.model_validate({"status": "working", "questions": None})
    >>> report.questions
    ()
    >>> RunMeta.model_validate({"run_id": "r1"}).flags is None
    True
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

RUNNER_STATUS_SCHEMA_VERSION = "1.0"


class RunnerState(str, Enum):
    """Closed set of states a runner may report about itself."""

    WORKING = "working"
    NEEDS_INPUT = "needs_input"
    BLOCKED = "blocked"
    READY_FOR_REVIEW = "ready_for_review"


RUNNER_STATE_VALUES = tuple(state.value for state in RunnerState)


def _empty_if_none(value: object) -> object:
    if value is None:
        return ""
    return value


def _tuple_if_list(value: object) -> object:
    if value is None:
        return ()
    if isinstance(value, list):
        return tuple(value)
    return value


class RunnerStatus(BaseModel):
    """Self-report written by a runner at each milestone.

    ``status`` stays a plain string so unrecognized values survive parsing;
    semantic checks live in :func:`overseer.runner_status.validate`.

    Attributes:
        schema_version: Contract version written by the runner.
        status: Reported state (see :class:`RunnerState`).
        updated_at: RFC 3339 timestamp of the last update.
        summary: Human-readable summary of the current state.
        questions: Open questions, required for ``needs_input``.
        blockers: Blocking issues, required for ``blocked``.
        how_to_test: Review instructions, required for ``ready_for_review``.
        risks: Optional informational risk notes.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    schema_version: str = ""
    status: str = ""
    updated_at: str = ""
    summary: str = ""
    questions: tuple[str, ...] = ()
    blockers: tuple[str, ...] = ()
    how_to_test: str = ""
    risks: tuple[str, ...] = ()

    @field_validator(
        "schema_version", "status", "updated_at", "summary", "how_to_test", mode="before"
    )
    @classmethod
    def _normalize_text(cls, value: object) -> object:
        return _empty_if_none(value)

    @field_validator("questions", "blockers", "risks", mode="before")
    @classmethod
    def _normalize_lists(cls, value: object) -> object:
        return _tuple_if_list(value)

    @property
    def state(self) -> RunnerState | None:
        """Return the recognized runner state, or ``None`` for unknown values."""
        try:
            return RunnerState(self.status)
        except ValueError:
            return None


class RunMetaArchive(BaseModel):
    """Archive facts recorded by the orchestrator for a run."""

    model_config = ConfigDict(extra="allow")

    merged_at: str | None = None
    archived_at: str | None = None


class RunMetaFlags(BaseModel):
    """Operator and lifecycle flags recorded for a run."""

    model_config = ConfigDict(extra="allow")

    abandoned: bool = False
    setup_failed: bool = False
    needs_attention: bool = False
    needs_attention_reason: str | None = None

    @field_validator("abandoned", "setup_failed", "needs_attention", mode="before")
    @classmethod
    def _normalize_flag(cls, value: object) -> object:
        if value is None:
            return False
        return value


class RunMeta(BaseModel):
    """Persisted metadata record for one run (``meta.json``).

    Only the orchestrator writes this record; Overseer reads it.

    Example:
        >>> meta = RunMeta(run_id="20260110-a3f2", archive=RunMetaArchive(merged_at="x"))
        >>> meta.archive.merged_at
        'x'
    """

    model_config = ConfigDict(extra="allow")

    schema_version: str | None = None
    run_id: str | None = None
    repo_id: str | None = None
    name: str | None = None
    runner: str | None = None
    runner_cmd: str | None = None
    parent_branch: str | None = None
    branch: str | None = None
    worktree_path: str | None = None
    created_at: str | None = None
    tmux_session_name: str | None = None
    archive: RunMetaArchive | None = None
    flags: RunMetaFlags | None = None
