import re
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

from typer.testing import CliRunner

import overseer.cli as cli

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def _strip_ansi(output: str) -> str:
    return ANSI_ESCAPE_RE.sub("", output)


def test_ls_passes_options(tmp_path: Path) -> None:
    captured: dict[str, object] = {}

    def fake_list(args: SimpleNamespace) -> None:
        captured.update(vars(args))

    runner = CliRunner()
    with patch("overseer.cli.list_cmd", fake_list):
        result = runner.invoke(
            cli.app,
            ["ls", "--all", "--json", "--data-dir", str(tmp_path), "--stall-threshold", "60"],
        )

    assert result.exit_code == 0, result.output
    assert captured == {
        "all": True,
        "json": True,
        "strict": False,
        "data_dir": tmp_path,
        "stall_threshold": 60,
    }


def test_show_passes_run_reference() -> None:
    captured: dict[str, object] = {}

    def fake_show(args: SimpleNamespace) -> None:
        captured["run"] = args.run
        captured["strict"] = args.strict

    runner = CliRunner()
    with patch("overseer.cli.show_cmd", fake_show):
        result = runner.invoke(cli.app, ["show", "20260110", "--strict"])

    assert result.exit_code == 0, result.output
    assert captured == {"run": "20260110", "strict": True}


def test_report_subcommands_pass_worktree(tmp_path: Path) -> None:
    calls: list[tuple[str, SimpleNamespace]] = []
    runner = CliRunner()
    with (
        patch("overseer.cli.report_init_cmd", lambda args: calls.append(("init", args))),
        patch("overseer.cli.report_validate_cmd", lambda args: calls.append(("validate", args))),
    ):
        init = runner.invoke(cli.app, ["report", "init", str(tmp_path), "--force"])
        validate = runner.invoke(cli.app, ["report", "validate", str(tmp_path)])

    assert init.exit_code == 0, init.output
    assert validate.exit_code == 0, validate.output
    assert calls[0][0] == "init"
    assert calls[0][1].worktree == tmp_path
    assert calls[0][1].force is True
    assert calls[1][0] == "validate"


def test_global_log_level_flag_sets_runtime_level() -> None:
    runner = CliRunner()
    with (
        patch("overseer.cli.list_cmd", lambda _args: None),
        patch("overseer.cli.overseer_log.set_level") as mock_set_level,
    ):
        result = runner.invoke(cli.app, ["--log-level", "debug", "ls"])

    assert result.exit_code == 0, result.output
    mock_set_level.assert_called_once_with("debug")


def test_global_log_level_accepts_warn_alias() -> None:
    runner = CliRunner()
    with (
        patch("overseer.cli.list_cmd", lambda _args: None),
        patch("overseer.cli.overseer_log.set_level") as mock_set_level,
    ):
        result = runner.invoke(cli.app, ["--log-level", "WARN", "ls"])

    assert result.exit_code == 0, result.output
    mock_set_level.assert_called_once_with("warning")


def test_global_log_level_rejects_unknown_values() -> None:
    runner = CliRunner()
    result = runner.invoke(cli.app, ["--log-level", "loud", "ls"], color=False)
    clean_output = _strip_ansi(result.output)

    assert result.exit_code != 0
    assert "--log-level" in clean_output
    assert "expected one of" in clean_output.lower()


def test_no_color_flag_disables_colorized_output() -> None:
    runner = CliRunner()
    with (
        patch("overseer.cli.list_cmd", lambda _args: None),
        patch("overseer.cli.overseer_log.set_no_color") as mock_set_no_color,
    ):
        result = runner.invoke(cli.app, ["--no-color", "ls"])

    assert result.exit_code == 0, result.output
    mock_set_no_color.assert_called_once_with(True)


def test_version_flag() -> None:
    result = CliRunner().invoke(cli.app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == cli.__version__
