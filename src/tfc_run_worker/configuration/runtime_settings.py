"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AwsSettings:
    """Region and optional endpoint override shared by every boto3 client."""

    region: str
    endpoint_url: str | None


@dataclass(frozen=True)
class KafkaQueueSettings:
    """Kafka consumer configuration for the run-request topic."""

    bootstrap_servers: tuple[str, ...]
    topic: str
    group_id: str
    security: Mapping[str, object]


@dataclass(frozen=True)
class QueueSettings:
    """Run-request queue configuration."""

    backend: str
    url: str | None
    max_messages: int
    wait_time_seconds: int
    kafka: KafkaQueueSettings | None


@dataclass(frozen=True)
class StorageSettings:
    """Blob storage holding packaged configuration bundles."""

    bucket: str


@dataclass(frozen=True)
class VariableSettings:
    """Key-value table holding workspace variables."""

    table: str
    partition_key: str


@dataclass(frozen=True)
class ConfigurationVersionSettings:
    """Key-value table holding configuration version records."""

    table: str


@dataclass(frozen=True)
class WorkspaceSettings:
    """Local paths used for execution environments."""

    root: Path
    download_dir: Path


@dataclass(frozen=True)
class EngineSettings:  # pylint: disable=too-many-instance-attributes
    """Provisioning engine binary and invocation settings."""

    version: str
    binary_path: Path
    install_dir: Path
    use_install_cache: bool
    variable_prefix: str
    command_timeout_seconds: int
    plan_enabled: bool


@dataclass(frozen=True)
class ProcessingSettings:
    """Message acknowledgement and run status policy."""

    acknowledgement: str
    record_run_status: bool


@dataclass(frozen=True)
class LoggingSettings:
    """Root logger configuration."""

    level: str


@dataclass(frozen=True)
class WorkerConfiguration:  # pylint: disable=too-many-instance-attributes
    """Top-level configuration aggregate."""

    path: Path | None
    aws: AwsSettings
    queue: QueueSettings
    storage: StorageSettings
    variables: VariableSettings
    configuration_versions: ConfigurationVersionSettings
    workspace: WorkspaceSettings
    engine: EngineSettings
    processing: ProcessingSettings
    logging: LoggingSettings
