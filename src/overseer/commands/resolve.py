"""Shared argument resolution for status commands."""

from __future__ import annotations

from pathlib import Path

from .. import config, log
from ..io import die
from ..store import RunLookupError, RunRecord, find_run, scan_all_runs


def resolve_settings(args: object) -> config.Settings:
    """Resolve runtime settings from CLI arguments and the environment."""
    data_dir = getattr(args, "data_dir", None)
    settings = config.resolve_settings(
        data_dir=Path(data_dir) if data_dir else None,
        stall_threshold=getattr(args, "stall_threshold", None),
    )
    log.debug(config.describe_setting(settings.data_dir))
    log.debug(config.describe_setting(settings.stall_threshold))
    return settings


def resolve_run(settings: config.Settings, ref: str) -> RunRecord:
    """Find one run by reference, exiting with a user-facing error on failure."""
    records = scan_all_runs(settings.data_dir.value)
    try:
        return find_run(records, ref)
    except RunLookupError as exc:
        die(str(exc))
