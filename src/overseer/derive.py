"""Pure status derivation for runs.

``derive`` reconciles the run metadata record with a locally observed
:class:`Snapshot` into one display status plus an orthogonal ``archived``
flag. No filesystem, tmux or network calls happen here, and the function is
total: every combination of present/absent inputs maps to a defined label.

Precedence (highest first):

1. broken           - metadata record missing or unreadable
2. merged           - ``archive.merged_at`` set
3. abandoned        - ``flags.abandoned``
4. failed           - ``flags.setup_failed``
5. needs attention  - ``flags.needs_attention``
6. ready for review - runner reports ``ready_for_review``
7. needs input      - runner reports ``needs_input``
8. blocked          - runner reports ``blocked``
9. working          - runner reports ``working``
10. stalled         - stall verdict and a live tmux session
11. active          - live tmux session
12. idle            - anything else

Orchestrator-side facts outrank the runner's self-report; the stall heuristic
only applies when no authoritative signal exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .models import RunMeta, RunnerState, RunnerStatus
from .watchdog import StallResult


class DerivedStatus(Enum):
    """Internal tag for each derived status."""

    BROKEN = "broken"
    MERGED = "merged"
    ABANDONED = "abandoned"
    FAILED = "failed"
    NEEDS_ATTENTION = "needs_attention"
    READY_FOR_REVIEW = "ready_for_review"
    NEEDS_INPUT = "needs_input"
    BLOCKED = "blocked"
    WORKING = "working"
    STALLED = "stalled"
    ACTIVE = "active"
    IDLE = "idle"


# User-visible contract; these strings never change once released.
STATUS_LABELS: dict[DerivedStatus, str] = {
    DerivedStatus.BROKEN: "broken",
    DerivedStatus.MERGED: "merged",
    DerivedStatus.ABANDONED: "abandoned",
    DerivedStatus.FAILED: "failed",
    DerivedStatus.NEEDS_ATTENTION: "needs attention",
    DerivedStatus.READY_FOR_REVIEW: "ready for review",
    DerivedStatus.NEEDS_INPUT: "needs input",
    DerivedStatus.BLOCKED: "blocked",
    DerivedStatus.WORKING: "working",
    DerivedStatus.STALLED: "stalled",
    DerivedStatus.ACTIVE: "active",
    DerivedStatus.IDLE: "idle",
}
DERIVED_STATUS_LABELS = tuple(STATUS_LABELS.values())

RUNNER_STATE_STATUSES: dict[RunnerState, DerivedStatus] = {
    RunnerState.READY_FOR_REVIEW: DerivedStatus.READY_FOR_REVIEW,
    RunnerState.NEEDS_INPUT: DerivedStatus.NEEDS_INPUT,
    RunnerState.BLOCKED: DerivedStatus.BLOCKED,
    RunnerState.WORKING: DerivedStatus.WORKING,
}


@dataclass(frozen=True)
class Snapshot:
    """Local inputs for status derivation, gathered fresh for each check.

    Attributes:
        tmux_active: The run's tmux session exists.
        worktree_present: The run's worktree directory exists on disk.
        runner_status: Parsed self-report, or ``None`` if missing or unusable.
        stall_result: Stall verdict, or ``None`` if not computed.
    """

    tmux_active: bool = False
    worktree_present: bool = False
    runner_status: RunnerStatus | None = None
    stall_result: StallResult | None = None


@dataclass(frozen=True)
class Derived:
    """Result of :func:`derive`.

    ``derived_status`` never carries an "(archived)" suffix; combining the two
    is a rendering concern.
    """

    status: DerivedStatus
    archived: bool

    @property
    def derived_status(self) -> str:
        return STATUS_LABELS[self.status]


def is_merged(meta: RunMeta) -> bool:
    """Return whether ``archive.merged_at`` is set."""
    return meta.archive is not None and bool(meta.archive.merged_at)


def is_abandoned(meta: RunMeta) -> bool:
    return meta.flags is not None and meta.flags.abandoned


def is_setup_failed(meta: RunMeta) -> bool:
    return meta.flags is not None and meta.flags.setup_failed


def is_needs_attention(meta: RunMeta) -> bool:
    return meta.flags is not None and meta.flags.needs_attention


def _runner_state_is(state: RunnerState) -> Callable[[RunMeta, Snapshot], bool]:
    def predicate(_meta: RunMeta, snapshot: Snapshot) -> bool:
        report = snapshot.runner_status
        return report is not None and report.state is state

    return predicate


def _is_stalled(_meta: RunMeta, snapshot: Snapshot) -> bool:
    stall = snapshot.stall_result
    return stall is not None and stall.is_stalled and snapshot.tmux_active


def _is_active(_meta: RunMeta, snapshot: Snapshot) -> bool:
    return snapshot.tmux_active


_RULES: tuple[tuple[DerivedStatus, Callable[[RunMeta, Snapshot], bool]], ...] = (
    (DerivedStatus.MERGED, lambda meta, _snapshot: is_merged(meta)),
    (DerivedStatus.ABANDONED, lambda meta, _snapshot: is_abandoned(meta)),
    (DerivedStatus.FAILED, lambda meta, _snapshot: is_setup_failed(meta)),
    (DerivedStatus.NEEDS_ATTENTION, lambda meta, _snapshot: is_needs_attention(meta)),
    *(
        (derived, _runner_state_is(state))
        for state, derived in RUNNER_STATE_STATUSES.items()
    ),
    (DerivedStatus.STALLED, _is_stalled),
    (DerivedStatus.ACTIVE, _is_active),
)


def derive_status(meta: RunMeta, snapshot: Snapshot) -> DerivedStatus:
    """Apply the precedence chain to a present metadata record."""
    for status, predicate in _RULES:
        if predicate(meta, snapshot):
            return status
    return DerivedStatus.IDLE


def derive(meta: RunMeta | None, snapshot: Snapshot) -> Derived:
    """Compute the derived status for a run.

    Args:
        meta: Parsed metadata record, or ``None`` for a broken run.
        snapshot: Locally observed inputs.

    Returns:
        The derived status and archived flag.

    Example:
        >>> derive(None, Snapshot(worktree_present=True)).derived_status
        'broken'
        >>> derive(RunMeta(), Snapshot(tmux_active=True)).derived_status
        'active'
    """
    archived = not snapshot.worktree_present
    if meta is None:
        return Derived(status=DerivedStatus.BROKEN, archived=archived)
    return Derived(status=derive_status(meta, snapshot), archived=archived)
