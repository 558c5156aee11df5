from overseer import tmux
from overseer.exec import CommandRequest, CommandResult


class FakeRunner:
    def __init__(self, result: CommandResult | None) -> None:
        self.result = result
        self.requests: list[CommandRequest] = []

    def run(self, request: CommandRequest) -> CommandResult | None:
        self.requests.append(request)
        return self.result


def _result(returncode: int = 0, stdout: str = "", stderr: str = "") -> CommandResult:
    return CommandResult(argv=("tmux",), returncode=returncode, stdout=stdout, stderr=stderr)


def test_list_sessions_parses_names() -> None:
    runner = FakeRunner(_result(stdout="overseer_r1\n\n  overseer_r2 \n"))

    assert tmux.list_sessions(runner=runner) == frozenset({"overseer_r1", "overseer_r2"})
    assert runner.requests[0].argv == ("tmux", "list-sessions", "-F", "#{session_name}")


def test_list_sessions_without_tmux_binary() -> None:
    assert tmux.list_sessions(runner=FakeRunner(None)) == frozenset()


def test_list_sessions_without_server() -> None:
    runner = FakeRunner(_result(returncode=1, stderr="no server running on /tmp/tmux-0/default"))

    assert tmux.list_sessions(runner=runner) == frozenset()
