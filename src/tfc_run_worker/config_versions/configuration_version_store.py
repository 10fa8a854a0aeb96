"""Configuration version records in DynamoDB."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

CONFIGURATION_SOURCE_API = "tfe-api"


class ConfigurationVersionStatus(str, Enum):
    """Upload lifecycle of a configuration version."""

    PENDING = "pending"
    UPLOADED = "uploaded"


class ConfigurationVersionStoreError(Exception):
    """Raised when a configuration version record cannot be written."""


@dataclass(frozen=True)
class ConfigurationVersion:
    """Configuration version record as persisted and returned by the API."""

    id: str
    auto_queue_runs: bool
    status: ConfigurationVersionStatus
    upload_url: str
    source: str = CONFIGURATION_SOURCE_API


class ConfigurationVersionStore:
    """Write configuration version records keyed by `ID`."""

    def __init__(self, table: str, client: Any) -> None:
        self._table = table
        self._client = client
        self._serializer = TypeSerializer()

    def put_pending(self, version: ConfigurationVersion) -> None:
        item = {
            "ID": version.id,
            "AutoQueueRuns": version.auto_queue_runs,
            "Source": version.source,
            "Status": version.status.value,
            "UploadURL": version.upload_url,
        }
        try:
            self._client.put_item(
                TableName=self._table,
                Item={name: self._serializer.serialize(value) for name, value in item.items()},
            )
        except (BotoCoreError, ClientError) as exc:
            raise ConfigurationVersionStoreError(
                f"Couldn't create configuration version {version.id}: {exc}"
            ) from exc

    def mark_uploaded(self, config_version_id: str) -> None:
        self._update(config_version_id, {"Status": ConfigurationVersionStatus.UPLOADED.value})
        logger.info("Updated configuration version %s status to 'uploaded'", config_version_id)

    def record_run_status(self, config_version_id: str, status: str, reason: str | None) -> None:
        self._update(config_version_id, {"RunStatus": status, "RunStatusReason": reason or ""})

    def _update(self, config_version_id: str, attributes: dict[str, str]) -> None:
        names = {f"#attr{index}": name for index, name in enumerate(attributes)}
        values = {
            f":val{index}": {"S": value} for index, value in enumerate(attributes.values())
        }
        assignments = ", ".join(f"#attr{index} = :val{index}" for index in range(len(attributes)))
        try:
            self._client.update_item(
                TableName=self._table,
                Key={"ID": {"S": config_version_id}},
                UpdateExpression=f"SET {assignments}",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
            )
        except (BotoCoreError, ClientError) as exc:
            raise ConfigurationVersionStoreError(
                f"Couldn't update configuration version {config_version_id}: {exc}"
            ) from exc
