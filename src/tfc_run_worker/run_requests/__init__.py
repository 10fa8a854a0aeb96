"""Run-request queue domain exports."""

from .kafka_queue import KafkaRunRequestQueue
from .run_request_messages import (
    QueueError,
    QueueMessage,
    RunRequest,
    RunRequestDecodeError,
    RunRequestQueue,
    decode_run_request,
)
from .sqs_queue import SqsRunRequestQueue

__all__ = [
    "KafkaRunRequestQueue",
    "QueueError",
    "QueueMessage",
    "RunRequest",
    "RunRequestDecodeError",
    "RunRequestQueue",
    "SqsRunRequestQueue",
    "decode_run_request",
]
