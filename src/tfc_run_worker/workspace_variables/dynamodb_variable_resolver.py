"""Workspace variable lookup backed by DynamoDB."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from boto3.dynamodb.types import TypeDeserializer
from botocore.exceptions import BotoCoreError, ClientError

from tfc_run_worker.timing import timed

from .variable_models import Variable

logger = logging.getLogger(__name__)


class VariableResolutionError(Exception):
    """Raised when workspace variables cannot be retrieved."""


class VariableResolver(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for workspace variable sources."""

    def get_variables(self, workspace_id: str) -> list[Variable]: ...


class DynamoDbVariableResolver:  # pylint: disable=too-few-public-methods
    """Query every variable stored under one workspace partition key.

    Items are stored as ``{id, workspace-id, type, attributes: {key, value,
    category, sensitive}}``.
    """

    def __init__(self, table: str, client: Any, *, partition_key: str = "workspace-id") -> None:
        self._table = table
        self._client = client
        self._partition_key = partition_key
        self._deserializer = TypeDeserializer()

    def get_variables(self, workspace_id: str) -> list[Variable]:
        variables: list[Variable] = []
        with timed("query-variables-dynamodb"):
            paginator = self._client.get_paginator("query")
            pages = paginator.paginate(
                TableName=self._table,
                KeyConditionExpression="#pk = :workspace_id",
                ExpressionAttributeNames={"#pk": self._partition_key},
                ExpressionAttributeValues={":workspace_id": {"S": workspace_id}},
            )
            try:
                for page in pages:
                    variables.extend(
                        self._to_variable(item, workspace_id) for item in page.get("Items", [])
                    )
            except (BotoCoreError, ClientError) as exc:
                raise VariableResolutionError(
                    f"Couldn't query variables for workspaceId={workspace_id}: {exc}"
                ) from exc
        logger.info("Retrieved %d variables for workspace %s", len(variables), workspace_id)
        return variables

    def _to_variable(self, item: Mapping[str, Any], workspace_id: str) -> Variable:
        try:
            record = {name: self._deserializer.deserialize(value) for name, value in item.items()}
        except (TypeError, ValueError) as exc:
            raise VariableResolutionError(
                f"Couldn't unmarshal query response for workspaceId={workspace_id}: {exc}"
            ) from exc
        attributes = record.get("attributes")
        if not isinstance(attributes, Mapping):
            raise VariableResolutionError(
                f"Variable {record.get('id')!r} of workspaceId={workspace_id} has no attributes."
            )
        key = attributes.get("key")
        if not isinstance(key, str) or not key:
            raise VariableResolutionError(
                f"Variable {record.get('id')!r} of workspaceId={workspace_id} has no key."
            )
        value = attributes.get("value")
        return Variable(
            id=str(record.get("id", "")),
            workspace_id=str(record.get(self._partition_key, workspace_id)),
            category=str(attributes.get("category", "")),
            key=key,
            value="" if value is None else str(value),
            sensitive=bool(attributes.get("sensitive", False)),
        )
