"""Worker loop exports."""

from .run_worker import (
    DEFAULT_MAX_MESSAGES,
    DEFAULT_WAIT_TIME_SECONDS,
    AcknowledgementPolicy,
    MessageProcessor,
    RunWorker,
)

__all__ = [
    "DEFAULT_MAX_MESSAGES",
    "DEFAULT_WAIT_TIME_SECONDS",
    "AcknowledgementPolicy",
    "MessageProcessor",
    "RunWorker",
]
