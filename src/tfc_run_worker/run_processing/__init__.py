"""Run processing domain exports."""

from .run_contracts import RunOutcome, RunStage, RunStatus
from .run_processor import RunProcessor
from .run_status import ConfigurationVersionStatusRecorder, RunStatusRecorder

__all__ = [
    "ConfigurationVersionStatusRecorder",
    "RunOutcome",
    "RunProcessor",
    "RunStage",
    "RunStatus",
    "RunStatusRecorder",
]
