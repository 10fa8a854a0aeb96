"""Per-run execution environment lifecycle."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from tfc_run_worker.timing import timed

from .archive_extraction import ArchiveExtractor, TarArchiveExtractor

logger = logging.getLogger(__name__)

BUNDLE_STRIP_COMPONENTS = 1


class EnvironmentBusyError(Exception):
    """Raised when a second run tries to occupy a root that is still in use."""


@dataclass(frozen=True)
class ExecutionEnvironment:
    """Ephemeral working directory for one run."""

    root_path: Path
    bundle_path: Path
    engine_version: str


class ExecutionEnvironmentManager:
    """Create, populate and remove the execution environment of one run at a time."""

    def __init__(
        self,
        *,
        root: Path,
        download_dir: Path,
        engine_version: str,
        extractor: ArchiveExtractor | None = None,
    ) -> None:
        self._root = root
        self._download_dir = download_dir
        self._engine_version = engine_version
        self._extractor = extractor or TarArchiveExtractor()
        self._occupied = False

    def resolve_root(self) -> Path:
        """Return the run root, creating it when missing."""
        self._root.mkdir(parents=True, exist_ok=True)
        return self._root

    def extract(self, archive_path: Path, root: Path) -> None:
        """Unpack `archive_path` into `root`, dropping the bundle's top-level directory."""
        with timed("extract-config-bundle"):
            root.mkdir(parents=True, exist_ok=True)
            self._extractor.extract(archive_path, root, BUNDLE_STRIP_COMPONENTS)

    def cleanup(self, environment: ExecutionEnvironment) -> None:
        """Remove the run root and the downloaded bundle; missing paths are ignored."""
        with timed("clean-execution-environment"):
            if environment.root_path.exists():
                try:
                    shutil.rmtree(environment.root_path)
                except OSError as exc:
                    logger.error(
                        "Error while deleting execution environment %s: %s",
                        environment.root_path,
                        exc,
                    )
            try:
                environment.bundle_path.unlink(missing_ok=True)
            except OSError as exc:
                logger.error(
                    "Error while deleting downloaded bundle %s: %s", environment.bundle_path, exc
                )

    @contextmanager
    def acquire(self, bundle_key: str) -> Iterator[ExecutionEnvironment]:
        """Hold the execution environment for one run and always clean it up afterwards."""
        if self._occupied:
            raise EnvironmentBusyError(f"Execution environment {self._root} is already in use.")
        environment = ExecutionEnvironment(
            root_path=self._root,
            bundle_path=self._download_dir / _bundle_filename(bundle_key),
            engine_version=self._engine_version,
        )
        if environment.root_path.exists():
            logger.warning("Removing leftover execution environment %s", environment.root_path)
            self.cleanup(environment)
        self._occupied = True
        try:
            yield environment
        finally:
            self.cleanup(environment)
            self._occupied = False


def _bundle_filename(bundle_key: str) -> str:
    name = PurePosixPath(bundle_key).name
    if not name or name in {".", ".."}:
        raise ValueError(f"Bundle key has no file name: {bundle_key!r}")
    return name
