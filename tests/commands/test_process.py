"""Tests for run_command_with_logs — relaying a subprocess through CommandLog."""

from __future__ import annotations

import sys

import pytest
from rich.console import Console

from cmdkit.commands.log import CommandLog
from cmdkit.commands.process import NOT_FOUND_CODE, run_command_with_logs
from cmdkit.domain.errors import CommandProcessError
from cmdkit.output.console import get_output


@pytest.fixture
def log(console: Console) -> CommandLog:
    return CommandLog(console, command_key="proc")


def _python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


class TestRunCommandWithLogs:
    def test_relays_stdout_and_stderr_with_prefix(self, log: CommandLog, console: Console) -> None:
        script = "import sys; print('hi'); print('warn', file=sys.stderr)"
        result = run_command_with_logs(_python(script), log, prefix="cli: ")
        assert result.code == 0
        assert result.success
        lines = get_output(console).splitlines()
        assert "cli: hi" in lines
        assert "cli: warn" in lines

    def test_failure_without_check(self, log: CommandLog, console: Console) -> None:
        script = "import sys; print('boom', file=sys.stderr); sys.exit(2)"
        result = run_command_with_logs(_python(script), log, check=False)
        assert not result.success
        assert result.code == 2
        assert "boom" in get_output(console)

    def test_failure_raises_by_default(self, log: CommandLog, console: Console) -> None:
        with pytest.raises(CommandProcessError) as exc_info:
            run_command_with_logs(_python("import sys; sys.exit(3)"), log)
        assert exc_info.value.returncode == 3
        assert "failed with exit code 3" in get_output(console)

    def test_missing_program(self, log: CommandLog) -> None:
        result = run_command_with_logs(["cmdkit-no-such-program-xyz"], log, check=False)
        assert result.code == NOT_FOUND_CODE
