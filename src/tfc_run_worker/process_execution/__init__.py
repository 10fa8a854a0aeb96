"""Process execution exports."""

from .command_runner import (
    CommandNotFoundError,
    CommandResult,
    CommandTimeoutError,
    ProcessExecutor,
    SubprocessExecutor,
)

__all__ = [
    "CommandNotFoundError",
    "CommandResult",
    "CommandTimeoutError",
    "ProcessExecutor",
    "SubprocessExecutor",
]
