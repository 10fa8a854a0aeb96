"""AWS Lambda entry points for the configuration version functions.

Both handlers read their table, bucket and region from the environment:
``CONFIG_VERSIONS_TABLE``, ``CONFIG_BUNDLE_BUCKET`` and ``AWS_REGION``. The
creation handler also reads ``UPLOAD_URL_LIFETIME_SECONDS``.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import boto3

from .configuration_version_store import ConfigurationVersionStore
from .upload_events import handle_upload_event
from .version_creation import (
    DEFAULT_UPLOAD_URL_LIFETIME_SECONDS,
    S3UploadPresigner,
    handle_create_request,
)

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

DEFAULT_REGION = "ca-central-1"
DEFAULT_TABLE = "configuration-versions"
DEFAULT_BUCKET = "tfc-configuration-files"


def upload_event_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle S3 object-created notifications for uploaded bundles."""
    updated = handle_upload_event(event, _configuration_version_store())
    return {"updated": updated}


def create_configuration_version_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle API Gateway requests creating a configuration version."""
    region = os.environ.get("AWS_REGION", DEFAULT_REGION)
    return handle_create_request(
        event,
        store=_configuration_version_store(),
        presigner=S3UploadPresigner(boto3.client("s3", region_name=region)),
        bucket=os.environ.get("CONFIG_BUNDLE_BUCKET", DEFAULT_BUCKET),
        lifetime_seconds=_upload_url_lifetime_seconds(),
    )


def _upload_url_lifetime_seconds() -> int:
    raw = os.environ.get("UPLOAD_URL_LIFETIME_SECONDS", "").strip()
    if not raw:
        return DEFAULT_UPLOAD_URL_LIFETIME_SECONDS
    lifetime = int(raw)
    if lifetime < 1:
        raise ValueError(f"UPLOAD_URL_LIFETIME_SECONDS must be at least 1, got {lifetime}.")
    return lifetime


def _configuration_version_store() -> ConfigurationVersionStore:
    region = os.environ.get("AWS_REGION", DEFAULT_REGION)
    return ConfigurationVersionStore(
        os.environ.get("CONFIG_VERSIONS_TABLE", DEFAULT_TABLE),
        boto3.client("dynamodb", region_name=region),
    )
