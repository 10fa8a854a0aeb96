"""Subprocess executor tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest
from tfc_run_worker.process_execution.command_runner import (
    CommandNotFoundError,
    CommandTimeoutError,
    SubprocessExecutor,
)


def test_run_captures_stdout_stderr_and_exit_code(tmp_path: Path) -> None:
    script = (
        "import os, sys; "
        "print(os.getcwd()); print(os.environ['RUN_MARKER']); "
        "sys.stderr.write('warn'); sys.exit(3)"
    )

    result = SubprocessExecutor().run(
        (sys.executable, "-c", script),
        cwd=tmp_path,
        env={**os.environ, "RUN_MARKER": "marker-value"},
    )

    lines = result.stdout.splitlines()
    assert Path(lines[0]).resolve() == tmp_path.resolve()
    assert lines[1] == "marker-value"
    assert result.stderr == "warn"
    assert result.exit_code == 3
    assert result.succeeded is False
    assert result.command[0] == sys.executable


def test_run_raises_command_not_found_for_missing_executable(tmp_path: Path) -> None:
    with pytest.raises(CommandNotFoundError, match="Command not found"):
        SubprocessExecutor().run((str(tmp_path / "no-such-binary"), "init"))


def test_run_raises_timeout_when_deadline_is_exceeded() -> None:
    with pytest.raises(CommandTimeoutError, match="deadline"):
        SubprocessExecutor().run(
            (sys.executable, "-c", "import time; time.sleep(5)"), timeout_seconds=0.2
        )
