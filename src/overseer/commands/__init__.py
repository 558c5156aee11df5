"""Command implementations exposed by the Overseer CLI."""

from .ls import list_runs
from .report import init_report, validate_report
from .show import show_run

__all__ = [
    "init_report",
    "list_runs",
    "show_run",
    "validate_report",
]
