"""Execution environment domain exports."""

from .archive_extraction import ArchiveExtractionError, ArchiveExtractor, TarArchiveExtractor
from .engine_versions import EngineVersionError, EngineVersionSelector
from .environment_manager import (
    EnvironmentBusyError,
    ExecutionEnvironment,
    ExecutionEnvironmentManager,
)

__all__ = [
    "ArchiveExtractionError",
    "ArchiveExtractor",
    "EngineVersionError",
    "EngineVersionSelector",
    "EnvironmentBusyError",
    "ExecutionEnvironment",
    "ExecutionEnvironmentManager",
    "TarArchiveExtractor",
]
