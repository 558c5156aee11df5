"""tmux session-liveness queries."""

from __future__ import annotations

from . import exec as exec_util
from . import log
from .exec import CommandRunner

_LIST_SESSIONS_TIMEOUT_SECONDS = 5.0


def list_sessions(*, runner: CommandRunner | None = None) -> frozenset[str]:
    """Return the names of all live tmux sessions.

    A missing tmux binary, a stopped server or a timeout all read as "no
    sessions"; liveness is a best-effort signal.
    """
    result = exec_util.try_run_command(
        ["tmux", "list-sessions", "-F", "#{session_name}"],
        timeout_seconds=_LIST_SESSIONS_TIMEOUT_SECONDS,
        runner=runner,
    )
    if result is None:
        log.debug("tmux not found; treating all sessions as inactive")
        return frozenset()
    if not result.ok:
        log.trace(f"tmux list-sessions exited {result.returncode}: {result.stderr.strip()}")
        return frozenset()
    return frozenset(line.strip() for line in result.stdout.splitlines() if line.strip())

