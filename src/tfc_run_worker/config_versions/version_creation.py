"""Configuration version creation with a pre-signed upload URL."""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from .configuration_version_store import (
    ConfigurationVersion,
    ConfigurationVersionStatus,
    ConfigurationVersionStore,
    ConfigurationVersionStoreError,
)

logger = logging.getLogger(__name__)

JSONAPI_TYPE = "configuration-versions"
DEFAULT_UPLOAD_URL_LIFETIME_SECONDS = 15 * 60


class ConfigVersionRequestError(Exception):
    """Raised when a create request body is not a valid JSON:API document."""


class PresignError(Exception):
    """Raised when an upload URL cannot be pre-signed."""


class UploadPresigner(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for issuing time-limited upload URLs."""

    def presign_put(self, bucket: str, key: str, lifetime_seconds: int) -> str: ...


class S3UploadPresigner:  # pylint: disable=too-few-public-methods
    """Pre-sign S3 PUT requests."""

    def __init__(self, client: Any) -> None:
        self._client = client

    def presign_put(self, bucket: str, key: str, lifetime_seconds: int) -> str:
        try:
            return self._client.generate_presigned_url(
                "put_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=lifetime_seconds,
            )
        except (BotoCoreError, ClientError) as exc:
            raise PresignError(
                f"Couldn't get a presigned request to put {bucket}:{key}: {exc}"
            ) from exc


def parse_create_request(body: str) -> bool:
    """Return the `auto-queue-runs` flag of a JSON:API create request."""
    try:
        document = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ConfigVersionRequestError(f"Error while parsing request json payload: {exc}") from exc
    data = document.get("data") if isinstance(document, Mapping) else None
    if not isinstance(data, Mapping):
        raise ConfigVersionRequestError("Request payload requires a 'data' object.")
    resource_type = data.get("type")
    if resource_type is not None and resource_type != JSONAPI_TYPE:
        raise ConfigVersionRequestError(
            f"Request data type must be '{JSONAPI_TYPE}', got '{resource_type}'."
        )
    attributes = data.get("attributes") or {}
    if not isinstance(attributes, Mapping):
        raise ConfigVersionRequestError("Request data attributes must be an object.")
    auto_queue_runs = attributes.get("auto-queue-runs", True)
    if not isinstance(auto_queue_runs, bool):
        raise ConfigVersionRequestError("Attribute 'auto-queue-runs' must be a boolean.")
    return auto_queue_runs


def create_configuration_version(
    body: str,
    *,
    store: ConfigurationVersionStore,
    presigner: UploadPresigner,
    bucket: str,
    lifetime_seconds: int = DEFAULT_UPLOAD_URL_LIFETIME_SECONDS,
    now: Callable[[], datetime] | None = None,
    id_factory: Callable[[], str] | None = None,
) -> ConfigurationVersion:
    """Create a pending configuration version and its upload URL."""
    auto_queue_runs = parse_create_request(body)
    config_version_id = (id_factory or _new_config_version_id)()
    created_at = (now or _utc_now)()
    object_key = f"{config_version_id}-{int(created_at.timestamp() * 1000)}.tar.gz"
    upload_url = presigner.presign_put(bucket, object_key, lifetime_seconds)
    version = ConfigurationVersion(
        id=config_version_id,
        auto_queue_runs=auto_queue_runs,
        status=ConfigurationVersionStatus.PENDING,
        upload_url=upload_url,
    )
    store.put_pending(version)
    logger.info("Created configuration version %s with upload key %s", version.id, object_key)
    return version


def to_jsonapi_document(version: ConfigurationVersion) -> dict[str, Any]:
    return {
        "data": {
            "id": version.id,
            "type": JSONAPI_TYPE,
            "attributes": {
                "auto-queue-runs": version.auto_queue_runs,
                "source": version.source,
                "status": version.status.value,
                "upload-url": version.upload_url,
            },
        }
    }


def handle_create_request(
    event: Mapping[str, Any],
    *,
    store: ConfigurationVersionStore,
    presigner: UploadPresigner,
    bucket: str,
    lifetime_seconds: int = DEFAULT_UPLOAD_URL_LIFETIME_SECONDS,
) -> dict[str, Any]:
    """API Gateway proxy handler returning a JSON:API response."""
    body = event.get("body") or ""
    request_id = event.get("requestContext", {}).get("requestId", "")
    logger.info("Processing request data for request %s (body size = %d)", request_id, len(body))
    try:
        version = create_configuration_version(
            body,
            store=store,
            presigner=presigner,
            bucket=bucket,
            lifetime_seconds=lifetime_seconds,
        )
    except ConfigVersionRequestError as exc:
        logger.warning("%s", exc)
        return {"statusCode": 400, "body": str(exc)}
    except (PresignError, ConfigurationVersionStoreError) as exc:
        logger.error("%s", exc)
        return {"statusCode": 500, "body": "Could not create configuration version."}
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/vnd.api+json"},
        "body": json.dumps(to_jsonapi_document(version)),
    }


def _new_config_version_id() -> str:
    return f"cv-{uuid.uuid4().hex[:20]}"


def _utc_now() -> datetime:
    return datetime.now(UTC)
