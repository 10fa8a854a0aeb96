"""Run-request queue entities and payload decoding."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


class RunRequestDecodeError(Exception):
    """Raised when a message body is not a valid run request."""


class QueueError(Exception):
    """Raised when the run-request queue cannot be read or acknowledged."""


@dataclass(frozen=True)
class QueueMessage:
    """One message received from the run-request queue.

    `receipt_handle` is opaque: an SQS receipt handle string or the raw Kafka
    message, depending on the backend that produced it.
    """

    message_id: str
    body: str
    receipt_handle: Any


@dataclass(frozen=True)
class RunRequest:
    """Decoded run-request payload."""

    config_version_id: str
    config_bundle_key: str
    workspace_id: str


class RunRequestQueue(Protocol):
    """Protocol implemented by the queue backends and test fakes."""

    def receive(self, max_messages: int, wait_time_seconds: int) -> list[QueueMessage]: ...

    def acknowledge(self, receipt_handle: Any) -> None: ...


_PAYLOAD_FIELDS = {
    "config_version_id": "configVersionId",
    "config_bundle_key": "configVersionS3ObjectKey",
    "workspace_id": "workspaceId",
}


def decode_run_request(body: str | bytes) -> RunRequest:
    """Decode a JSON run-request message body."""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RunRequestDecodeError(f"Run request body is not valid JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise RunRequestDecodeError("Run request body must be a JSON object.")

    values = {
        attribute: _require_field(payload, field_name)
        for attribute, field_name in _PAYLOAD_FIELDS.items()
    }
    return RunRequest(**values)


def _require_field(payload: Mapping[str, Any], field_name: str) -> str:
    value = payload.get(field_name)
    if not isinstance(value, str):
        raise RunRequestDecodeError(f"Run request field '{field_name}' must be a string.")
    if not value.strip():
        raise RunRequestDecodeError(f"Run request field '{field_name}' must not be empty.")
    return value
