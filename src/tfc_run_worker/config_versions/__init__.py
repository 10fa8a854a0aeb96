"""Configuration version domain exports."""

from .configuration_version_store import (
    ConfigurationVersion,
    ConfigurationVersionStatus,
    ConfigurationVersionStore,
    ConfigurationVersionStoreError,
)
from .upload_events import ConfigVersionIdError, extract_config_version_id, handle_upload_event
from .version_creation import (
    ConfigVersionRequestError,
    PresignError,
    S3UploadPresigner,
    UploadPresigner,
    create_configuration_version,
    handle_create_request,
    parse_create_request,
    to_jsonapi_document,
)

__all__ = [
    "ConfigVersionIdError",
    "ConfigVersionRequestError",
    "ConfigurationVersion",
    "ConfigurationVersionStatus",
    "ConfigurationVersionStore",
    "ConfigurationVersionStoreError",
    "PresignError",
    "S3UploadPresigner",
    "UploadPresigner",
    "create_configuration_version",
    "extract_config_version_id",
    "handle_create_request",
    "handle_upload_event",
    "parse_create_request",
    "to_jsonapi_document",
]
