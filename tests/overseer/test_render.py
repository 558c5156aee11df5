import datetime as dt
from pathlib import Path

from overseer import render
from overseer.derive import Derived, DerivedStatus, Snapshot
from overseer.store import RunRecord
from overseer.watchdog import StallResult
from tests.overseer.helpers import make_meta, make_report

NOW = dt.datetime(2026, 1, 10, 12, 0, tzinfo=dt.timezone.utc)


def _record(**meta_overrides: object) -> RunRecord:
    return RunRecord(
        repo_id="repo",
        run_id="20260110-a3f2",
        run_dir=Path("/data/repos/repo/runs/20260110-a3f2"),
        meta=make_meta(**meta_overrides),
    )


def test_format_status_adds_archived_suffix() -> None:
    assert render.format_status(Derived(DerivedStatus.NEEDS_INPUT, archived=False)) == (
        "needs input"
    )
    assert render.format_status(Derived(DerivedStatus.IDLE, archived=True)) == "idle (archived)"


def test_display_name_variants() -> None:
    broken = RunRecord(repo_id="r", run_id="x", run_dir=Path("/x"), meta=None)

    assert render.display_name(broken) == "<broken>"
    assert render.display_name(_record(name="")) == "<untitled>"
    assert render.display_name(_record(name="n" * 60)) == "n" * 49 + "…"


def test_format_relative_time_buckets() -> None:
    cases = {
        dt.timedelta(seconds=30): "just now",
        dt.timedelta(minutes=1): "1 min ago",
        dt.timedelta(hours=3): "3 hours ago",
        dt.timedelta(days=1): "1 day ago",
        dt.timedelta(days=14): "2 weeks ago",
    }
    for delta, expected in cases.items():
        assert render.format_relative_time(NOW - delta, NOW) == expected
    assert render.format_relative_time(NOW - dt.timedelta(days=60), NOW) == "2025-11-11"


def test_format_created_falls_back_to_raw_value() -> None:
    assert render.format_created(_record(created_at="2026-01-10T11:00:00Z"), NOW) == "1 hour ago"
    assert render.format_created(_record(created_at="last week"), NOW) == "last week"
    assert render.format_created(_record(created_at=None), NOW) == ""


def test_run_payload_includes_inputs() -> None:
    report = make_report("working", updated_at="2026-01-10T11:50:00Z")
    snapshot = Snapshot(
        tmux_active=True,
        worktree_present=True,
        runner_status=report,
        stall_result=StallResult(is_stalled=False),
    )
    derived = Derived(DerivedStatus.WORKING, archived=False)

    payload = render.run_payload(_record(), snapshot, derived, now=NOW)

    assert payload["derived_status"] == "working"
    assert payload["archived"] is False
    assert payload["broken"] is False
    runner = payload["runner_status"]
    assert isinstance(runner, dict)
    assert runner["status"] == "working"
    assert runner["age_seconds"] == 600
    assert payload["stall"] == {"is_stalled": False, "stalled_duration_seconds": 0}
