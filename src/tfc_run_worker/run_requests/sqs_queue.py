"""Amazon SQS run-request queue."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from tfc_run_worker.timing import timed

from .run_request_messages import QueueError, QueueMessage

logger = logging.getLogger(__name__)


class SqsRunRequestQueue:
    """Receive and delete run-request messages on one SQS queue."""

    def __init__(self, queue_url: str, client: Any) -> None:
        self._queue_url = queue_url
        self._client = client

    def receive(self, max_messages: int, wait_time_seconds: int) -> list[QueueMessage]:
        try:
            response = self._client.receive_message(
                QueueUrl=self._queue_url,
                MaxNumberOfMessages=max_messages,
                WaitTimeSeconds=wait_time_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            raise QueueError(
                f"Couldn't get messages from queue {self._queue_url}: {exc}"
            ) from exc
        return [
            QueueMessage(
                message_id=raw["MessageId"],
                body=raw.get("Body", ""),
                receipt_handle=raw["ReceiptHandle"],
            )
            for raw in response.get("Messages", [])
        ]

    def acknowledge(self, receipt_handle: Any) -> None:
        with timed("delete-sqs-message"):
            try:
                self._client.delete_message(
                    QueueUrl=self._queue_url,
                    ReceiptHandle=receipt_handle,
                )
            except (BotoCoreError, ClientError) as exc:
                raise QueueError(
                    f"Couldn't delete message from queue {self._queue_url}: {exc}"
                ) from exc
        logger.debug("Deleted message from queue %s", self._queue_url)
