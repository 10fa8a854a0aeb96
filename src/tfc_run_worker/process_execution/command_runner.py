"""External process execution."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class CommandNotFoundError(Exception):
    """Raised when the executable of a command does not exist."""


class CommandTimeoutError(Exception):
    """Raised when a command exceeds its deadline."""


@dataclass(frozen=True)
class CommandResult:
    """Captured result of one finished command."""

    command: tuple[str, ...]
    stdout: str
    stderr: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ProcessExecutor(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for running external commands; fakes implement it in tests."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        timeout_seconds: float | None = None,
    ) -> CommandResult: ...


class SubprocessExecutor:  # pylint: disable=too-few-public-methods
    """Run commands with `subprocess`, capturing output as text.

    A non-zero exit code is reported in the result rather than raised.
    """

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        timeout_seconds: float | None = None,
    ) -> CommandResult:
        args = tuple(command)
        try:
            completed = subprocess.run(
                list(args),
                cwd=cwd,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
                timeout=timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise CommandNotFoundError(f"Command not found: {shlex.join(args)}") from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandTimeoutError(
                f"Command exceeded {timeout_seconds}s deadline: {shlex.join(args)}"
            ) from exc
        return CommandResult(
            command=args,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            exit_code=completed.returncode,
        )
