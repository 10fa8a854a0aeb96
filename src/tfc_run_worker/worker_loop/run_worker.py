"""Queue polling worker loop."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from tfc_run_worker.run_processing import RunOutcome, RunStage, RunStatus
from tfc_run_worker.run_requests import QueueError, QueueMessage, RunRequestQueue

logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGES = 5
DEFAULT_WAIT_TIME_SECONDS = 10


class AcknowledgementPolicy(str, Enum):
    """When a processed message is removed from the queue.

    ALWAYS deletes every message once processed; failed runs are retried only
    when an upstream system submits a new run request. ON_SUCCESS leaves failed
    runs on the queue so the broker redelivers them; it needs per-message
    acknowledgement (SQS) and is refused for Kafka, whose offset commits are
    cumulative. Poison messages are acknowledged under both policies.
    """

    ALWAYS = "always"
    ON_SUCCESS = "on_success"


class MessageProcessor(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for run processors invoked by the worker."""

    def process(self, message: QueueMessage) -> RunOutcome: ...


class RunWorker:
    """Poll the run-request queue and process messages one at a time."""

    def __init__(
        self,
        queue: RunRequestQueue,
        processor: MessageProcessor,
        *,
        max_messages: int = DEFAULT_MAX_MESSAGES,
        wait_time_seconds: int = DEFAULT_WAIT_TIME_SECONDS,
        acknowledgement: AcknowledgementPolicy = AcknowledgementPolicy.ALWAYS,
    ) -> None:
        self._queue = queue
        self._processor = processor
        self._max_messages = max_messages
        self._wait_time_seconds = wait_time_seconds
        self._acknowledgement = acknowledgement

    def run(self, max_iterations: int | None = None) -> None:
        """Poll forever, or for `max_iterations` receive calls when given."""
        iteration = 0
        while max_iterations is None or iteration < max_iterations:
            self.run_once()
            iteration += 1

    def run_once(self) -> list[RunOutcome]:
        """Receive one batch and process every message in it."""
        try:
            messages = self._queue.receive(self._max_messages, self._wait_time_seconds)
        except QueueError as exc:
            logger.error("%s", exc)
            return []
        if not messages:
            return []

        logger.info("Fetched %d messages from queue", len(messages))
        return [self._handle(message) for message in messages]

    def _handle(self, message: QueueMessage) -> RunOutcome:
        try:
            outcome = self._processor.process(message)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("Processor raised for message %s", message.message_id)
            outcome = RunOutcome(
                status=RunStatus.FAILED,
                message_id=message.message_id,
                stage=RunStage.RECEIVED,
                reason=str(exc),
            )
        if outcome.status is RunStatus.FAILED:
            logger.error(
                "Error when processing message %s: %s", message.message_id, outcome.reason
            )
        if self._should_acknowledge(outcome):
            try:
                self._queue.acknowledge(message.receipt_handle)
            except QueueError as exc:
                logger.error("%s", exc)
        else:
            logger.info("Leaving message %s on the queue for redelivery", message.message_id)
        return outcome

    def _should_acknowledge(self, outcome: RunOutcome) -> bool:
        if self._acknowledgement is AcknowledgementPolicy.ALWAYS:
            return True
        return outcome.status is not RunStatus.FAILED
