# ruff: noqa: E402

import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import overseer.log as overseer_log

DOCTEST_MODULES = {
    ROOT / "src" / "overseer" / "__init__.py",
    ROOT / "src" / "overseer" / "config.py",
    ROOT / "src" / "overseer" / "derive.py",
    ROOT / "src" / "overseer" / "log.py",
    ROOT / "src" / "overseer" / "models.py",
    ROOT / "src" / "overseer" / "paths.py",
    ROOT / "src" / "overseer" / "render.py",
    ROOT / "src" / "overseer" / "runner_status.py",
    ROOT / "src" / "overseer" / "snapshot.py",
    ROOT / "src" / "overseer" / "watchdog.py",
}


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OVERSEER_DATA_DIR",
        "OVERSEER_STALL_THRESHOLD",
        "OVERSEER_LOG_LEVEL",
        "OVERSEER_NO_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr(overseer_log, "_configured_level", None)
    monkeypatch.setattr(overseer_log, "_no_color_override", None)


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
