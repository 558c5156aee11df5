"""Path helpers for locating Overseer data directories and files."""

from pathlib import Path

from platformdirs import user_data_dir

OVERSEER_APP_NAME = "overseer"
REPOS_DIRNAME = "repos"
RUNS_DIRNAME = "runs"
RUN_META_FILENAME = "meta.json"
WORKTREE_STATE_DIRNAME = ".overseer"
RUNNER_STATUS_FILENAME = "runner_status.json"
TMUX_SESSION_PREFIX = "overseer_"


def default_data_dir() -> Path:
    """Return the platform default Overseer data directory.

    Returns:
        Path to the user data directory for Overseer.

    Example:
        >>> isinstance(default_data_dir(), Path)
        True
    """
    return Path(user_data_dir(OVERSEER_APP_NAME))


def repos_dir(data_dir: Path) -> Path:
    """Return the directory holding per-repo run data.

    Example:
        >>> repos_dir(Path("/data")).as_posix()
        '/data/repos'
    """
    return data_dir / REPOS_DIRNAME


def runs_dir(data_dir: Path, repo_id: str) -> Path:
    """Return the runs directory for a repo."""
    return repos_dir(data_dir) / repo_id / RUNS_DIRNAME


def run_dir(data_dir: Path, repo_id: str, run_id: str) -> Path:
    """Return the directory for one run.

    Example:
        >>> run_dir(Path("/data"), "abcd", "20260110-a3f2").as_posix()
        '/data/repos/abcd/runs/20260110-a3f2'
    """
    return runs_dir(data_dir, repo_id) / run_id


def run_meta_path(data_dir: Path, repo_id: str, run_id: str) -> Path:
    """Return the path to a run's metadata record."""
    return run_dir(data_dir, repo_id, run_id) / RUN_META_FILENAME


def worktree_state_dir(worktree: Path) -> Path:
    """Return the state directory inside a run worktree.

    Example:
        >>> worktree_state_dir(Path("/wt")).as_posix()
        '/wt/.overseer/state'
    """
    return worktree / WORKTREE_STATE_DIRNAME / "state"


def runner_status_path(worktree: Path) -> Path:
    """Return the path to the runner self-report file inside a worktree.

    Example:
        >>> runner_status_path(Path("/wt")).as_posix()
        '/wt/.overseer/state/runner_status.json'
    """
    return worktree_state_dir(worktree) / RUNNER_STATUS_FILENAME


def default_tmux_session_name(run_id: str) -> str:
    """Return the tmux session name used when a run records none.

    Example:
        >>> default_tmux_session_name("20260110-a3f2")
        'overseer_20260110-a3f2'
    """
    return f"{TMUX_SESSION_PREFIX}{run_id}"
