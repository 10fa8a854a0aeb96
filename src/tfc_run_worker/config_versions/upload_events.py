"""Upload-completion event handling."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote_plus

from .configuration_version_store import ConfigurationVersionStore

logger = logging.getLogger(__name__)


class ConfigVersionIdError(Exception):
    """Raised when an object key carries no configuration version id."""


def extract_config_version_id(object_key: str) -> str:
    """Return the configuration version id encoded in an uploaded bundle key.

    ``cv-cs1f56el089s714shag0-1728246425601.tar.gz`` -> ``cv-cs1f56el089s714shag0``
    """
    last_hyphen = object_key.rfind("-")
    if last_hyphen == -1:
        raise ConfigVersionIdError(
            f"Could not extract configuration version id from object key={object_key}"
        )
    return object_key[:last_hyphen]


def handle_upload_event(event: Mapping[str, Any], store: ConfigurationVersionStore) -> list[str]:
    """Mark the configuration version of every uploaded object as uploaded."""
    updated: list[str] = []
    for record in event.get("Records", []):
        s3 = record.get("s3", {})
        bucket = s3.get("bucket", {}).get("name", "")
        key = unquote_plus(s3.get("object", {}).get("key", ""))
        logger.info(
            "[%s - %s] Bucket = %s, Key = %s",
            record.get("eventSource", ""),
            record.get("eventTime", ""),
            bucket,
            key,
        )
        config_version_id = extract_config_version_id(key)
        store.mark_uploaded(config_version_id)
        updated.append(config_version_id)
    return updated
