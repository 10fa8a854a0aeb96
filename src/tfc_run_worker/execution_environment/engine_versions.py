"""Provisioning engine binary version selection."""

from __future__ import annotations

import logging
from pathlib import Path

from tfc_run_worker.process_execution import (
    CommandNotFoundError,
    CommandTimeoutError,
    ProcessExecutor,
)
from tfc_run_worker.timing import timed

logger = logging.getLogger(__name__)

TFSWITCH_EXECUTABLE = "tfswitch"


class EngineVersionError(Exception):
    """Raised when the requested engine version cannot be installed or selected."""


class EngineVersionSelector:  # pylint: disable=too-few-public-methods
    """Install and activate an engine version with `tfswitch`.

    With the install cache enabled, versions are installed under a shared
    directory so repeated runs on the same node reuse earlier downloads.
    """

    def __init__(
        self,
        executor: ProcessExecutor,
        *,
        install_dir: Path,
        use_cache: bool = True,
        timeout_seconds: float | None = None,
    ) -> None:
        self._executor = executor
        self._install_dir = install_dir
        self._use_cache = use_cache
        self._timeout_seconds = timeout_seconds

    def select(self, version: str) -> None:
        if self._use_cache:
            command = (TFSWITCH_EXECUTABLE, "-i", str(self._install_dir), version)
        else:
            command = (TFSWITCH_EXECUTABLE, version)
        with timed("switch-engine-version"):
            try:
                result = self._executor.run(command, timeout_seconds=self._timeout_seconds)
            except (CommandNotFoundError, CommandTimeoutError) as exc:
                raise EngineVersionError(f"tfswitch {version} failed: {exc}") from exc
        if not result.succeeded:
            raise EngineVersionError(
                f"tfswitch {version} exited with code {result.exit_code}: "
                f"{result.stderr.strip() or result.stdout.strip()}"
            )
        logger.info("Selected engine version %s", version)
