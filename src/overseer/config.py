"""Resolve supported ``OVERSEER_*`` values into runtime settings.

Explicit CLI values win over the environment, which wins over built-in
defaults. Each resolved value remembers where it came from so commands can
explain themselves at debug level.
"""

from __future__ import annotations

import datetime as dt
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Generic, Literal, TypeVar

from . import paths
from .io import die
from .watchdog import DEFAULT_STALL_THRESHOLD

T = TypeVar("T")

DefaultSource = Literal["cli", "env", "built-in"]

DATA_DIR_ENV = "OVERSEER_DATA_DIR"
STALL_THRESHOLD_ENV = "OVERSEER_STALL_THRESHOLD"


@dataclass(frozen=True)
class ResolvedSetting(Generic[T]):
    """Represent one resolved setting value and where it came from."""

    name: str
    value: T
    source: DefaultSource
    env_var: str | None = None
    raw_env_value: str | None = None


@dataclass(frozen=True)
class Settings:
    """Runtime settings shared by the status commands."""

    data_dir: ResolvedSetting[Path]
    stall_threshold: ResolvedSetting[dt.timedelta]


def resolve_data_dir(explicit: Path | None = None) -> ResolvedSetting[Path]:
    """Resolve the run data directory.

    Args:
        explicit: Explicit ``--data-dir`` value from CLI arguments.

    Returns:
        Resolved data directory and source metadata.
    """
    if explicit is not None:
        return ResolvedSetting(name="data_dir", value=explicit.expanduser(), source="cli")
    raw = os.environ.get(DATA_DIR_ENV, "").strip()
    if not raw:
        return ResolvedSetting(
            name="data_dir", value=paths.default_data_dir(), source="built-in"
        )
    return ResolvedSetting(
        name="data_dir",
        value=Path(raw).expanduser(),
        source="env",
        env_var=DATA_DIR_ENV,
        raw_env_value=raw,
    )


def _parse_threshold_seconds(raw: str, *, source: str) -> dt.timedelta:
    try:
        value = int(raw)
    except ValueError:
        die(f"{source} must be an integer number of seconds")
    if value <= 0:
        die(f"{source} must be a positive number of seconds")
    return dt.timedelta(seconds=value)


def resolve_stall_threshold(
    explicit: int | None = None,
) -> ResolvedSetting[dt.timedelta]:
    """Resolve how long a silent self-report may go before a run is stalled.

    Args:
        explicit: Explicit ``--stall-threshold`` seconds from CLI arguments.

    Returns:
        Resolved threshold and source metadata.
    """
    if explicit is not None:
        return ResolvedSetting(
            name="stall_threshold",
            value=_parse_threshold_seconds(str(explicit), source="--stall-threshold"),
            source="cli",
        )
    raw = os.environ.get(STALL_THRESHOLD_ENV, "").strip()
    if not raw:
        return ResolvedSetting(
            name="stall_threshold", value=DEFAULT_STALL_THRESHOLD, source="built-in"
        )
    return ResolvedSetting(
        name="stall_threshold",
        value=_parse_threshold_seconds(raw, source=STALL_THRESHOLD_ENV),
        source="env",
        env_var=STALL_THRESHOLD_ENV,
        raw_env_value=raw,
    )


def resolve_settings(
    *, data_dir: Path | None = None, stall_threshold: int | None = None
) -> Settings:
    """Resolve every runtime setting at once."""
    return Settings(
        data_dir=resolve_data_dir(data_dir),
        stall_threshold=resolve_stall_threshold(stall_threshold),
    )


def describe_setting(value: ResolvedSetting[object]) -> str:
    """Return a human-readable diagnostics message for a resolved setting.

    Example:
        >>> describe_setting(ResolvedSetting(name="data_dir", value="/d", source="cli"))
        "data_dir='/d' (cli)"
    """
    if value.source == "env":
        raw = value.raw_env_value if value.raw_env_value is not None else ""
        return f"{value.name}={value.value!r} (from {value.env_var}={raw!r})"
    return f"{value.name}={value.value!r} ({value.source})"


__all__ = [
    "DATA_DIR_ENV",
    "STALL_THRESHOLD_ENV",
    "ResolvedSetting",
    "Settings",
    "describe_setting",
    "resolve_data_dir",
    "resolve_settings",
    "resolve_stall_threshold",
]
