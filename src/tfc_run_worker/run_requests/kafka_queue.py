"""Kafka-backed run-request queue."""

from __future__ import annotations

import logging
from typing import Any, Protocol, cast

from confluent_kafka import Consumer, KafkaError, KafkaException

from tfc_run_worker.configuration.runtime_settings import KafkaQueueSettings

from .run_request_messages import QueueError, QueueMessage

_KAFKA_CLIENT_LOGGER = logging.getLogger("tfc_run_worker.kafka.client")
_KAFKA_CLIENT_LOGGER.addHandler(logging.NullHandler())
_KAFKA_CLIENT_LOGGER.propagate = False
_KAFKA_CLIENT_LOGGER.setLevel(logging.CRITICAL + 1)

logger = logging.getLogger(__name__)


class KafkaConsumerProtocol(Protocol):
    """Protocol implemented by both real and fake consumers."""

    def subscribe(self, topics: list[str], **kwargs: Any) -> None: ...

    def consume(self, num_messages: int = 1, timeout: float = -1) -> list[Any]: ...

    def commit(self, message: Any = None, asynchronous: bool = True) -> Any: ...

    def close(self) -> None: ...


class KafkaRunRequestQueue:
    """Consume run requests from a Kafka topic with manual offset commits.

    Acknowledging a message commits its offset synchronously, so a worker that
    stops before acknowledging sees the message again after a rebalance.
    """

    def __init__(
        self,
        settings: KafkaQueueSettings,
        consumer: KafkaConsumerProtocol | None = None,
    ) -> None:
        self._settings = settings
        self._consumer = consumer or self._create_consumer()
        self._subscribed = False

    def receive(self, max_messages: int, wait_time_seconds: int) -> list[QueueMessage]:
        if not self._subscribed:
            self._consumer.subscribe([self._settings.topic])
            self._subscribed = True
        try:
            records = self._consumer.consume(
                num_messages=max_messages, timeout=float(wait_time_seconds)
            )
        except KafkaException as exc:
            raise QueueError(f"Couldn't consume from topic {self._settings.topic}: {exc}") from exc

        messages: list[QueueMessage] = []
        errors: list[str] = []
        for record in records:
            error = record.error()
            if error is not None:
                partition_eof_code = getattr(KafkaError, "_PARTITION_EOF", None)
                if partition_eof_code is not None and error.code() == partition_eof_code:
                    continue
                logger.error("Skipping Kafka error on topic %s: %s", self._settings.topic, error)
                errors.append(str(error))
                continue
            messages.append(
                QueueMessage(
                    message_id=f"{record.topic()}:{record.partition()}:{record.offset()}",
                    body=_decode_value(record.value()),
                    receipt_handle=record,
                )
            )
        if errors and not messages:
            raise QueueError(
                f"Kafka error on topic {self._settings.topic}: {'; '.join(errors)}"
            )
        return messages

    def acknowledge(self, receipt_handle: Any) -> None:
        try:
            self._consumer.commit(message=receipt_handle, asynchronous=False)
        except KafkaException as exc:
            raise QueueError(
                f"Couldn't commit offset on topic {self._settings.topic}: {exc}"
            ) from exc
        logger.debug("Committed offset on topic %s", self._settings.topic)

    def close(self) -> None:
        self._consumer.close()

    def _create_consumer(self) -> KafkaConsumerProtocol:
        config: dict[str, str | int | float | bool | None] = {
            "bootstrap.servers": ",".join(self._settings.bootstrap_servers),
            "group.id": self._settings.group_id,
            "enable.auto.commit": False,
            "auto.offset.reset": "earliest",
        }
        for key, value in self._settings.security.items():
            if isinstance(value, str | int | float | bool) or value is None:
                config[key] = value
        try:
            return cast(
                KafkaConsumerProtocol,
                Consumer(config, logger=_KAFKA_CLIENT_LOGGER),  # type: ignore[call-arg]
            )
        except TypeError:
            # Older/mock Consumer implementations may not support the logger kwarg.
            return cast(KafkaConsumerProtocol, Consumer(config))


def _decode_value(value: bytes | None) -> str:
    if value is None:
        return ""
    return value.decode("utf-8", errors="replace")
