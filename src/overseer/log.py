"""Leveled terminal logging for Overseer commands.

Messages at WARNING and above go to stderr; lower levels share stdout with
command output. The threshold comes from ``--log-level`` or
``OVERSEER_LOG_LEVEL`` and defaults to INFO. Color is dropped for
``--no-color`` or when ``NO_COLOR`` / ``OVERSEER_NO_COLOR`` is set.
"""

from __future__ import annotations

import os
import sys
from enum import IntEnum
from typing import NamedTuple

from rich.console import Console
from rich.text import Text

LOG_LEVEL_ENV = "OVERSEER_LOG_LEVEL"
NO_COLOR_ENVS = ("NO_COLOR", "OVERSEER_NO_COLOR")


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    SUCCESS = 35
    WARNING = 40
    ERROR = 50


class _Presentation(NamedTuple):
    style: str
    stderr: bool


_PRESENTATION: dict[LogLevel, _Presentation] = {
    LogLevel.TRACE: _Presentation("dim", False),
    LogLevel.DEBUG: _Presentation("cyan", False),
    LogLevel.INFO: _Presentation("", False),
    LogLevel.SUCCESS: _Presentation("green", False),
    LogLevel.WARNING: _Presentation("yellow", True),
    LogLevel.ERROR: _Presentation("bold red", True),
}

LEVEL_NAMES = tuple(level.name.lower() for level in LogLevel)
_ALIASES = {"warn": LogLevel.WARNING}
DEFAULT_LEVEL = LogLevel.INFO

_configured_level: LogLevel | None = None
_no_color_override: bool | None = None


def parse_level(value: str | None) -> LogLevel | None:
    """Return the level named by ``value``, or ``None`` if it names none.

    Example:
        >>> parse_level(" Warn ") is LogLevel.WARNING
        True
        >>> parse_level("loud") is None
        True
    """
    if value is None:
        return None
    name = value.strip().lower()
    if name in _ALIASES:
        return _ALIASES[name]
    if name not in LEVEL_NAMES:
        return None
    return LogLevel[name.upper()]


def configured_level() -> LogLevel:
    """Return the active level, reading the environment on first use."""
    global _configured_level
    if _configured_level is None:
        _configured_level = parse_level(os.environ.get(LOG_LEVEL_ENV)) or DEFAULT_LEVEL
    return _configured_level


def set_level(value: str | None) -> None:
    """Set the active log level; unknown names fall back to INFO."""
    global _configured_level
    _configured_level = parse_level(value) or DEFAULT_LEVEL


def set_no_color(value: bool) -> None:
    global _no_color_override
    _no_color_override = value


def no_color() -> bool:
    if _no_color_override is not None:
        return _no_color_override
    return any(os.environ.get(name) for name in NO_COLOR_ENVS)


def is_enabled(level: LogLevel) -> bool:
    return level >= configured_level()


def console(*, stderr: bool = False) -> Console:
    """Return a console for stdout (tables, reports) or stderr."""
    return Console(
        file=sys.stderr if stderr else sys.stdout,
        soft_wrap=True,
        highlight=False,
        no_color=no_color(),
    )


def emit(
    level: LogLevel,
    message: str,
    *,
    style: str | None = None,
    stderr: bool | None = None,
) -> None:
    if not is_enabled(level):
        return
    presentation = _PRESENTATION[level]
    to_stderr = presentation.stderr if stderr is None else stderr
    console(stderr=to_stderr).print(Text(message, style=style or presentation.style))


def trace(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.TRACE, message, style=style)


def debug(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.DEBUG, message, style=style)


def info(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.INFO, message, style=style)


def success(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.SUCCESS, message, style=style)


def warning(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.WARNING, message, style=style)


def error(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.ERROR, message, style=style)
