"""Configuration loader service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .config_scaffold_builder import REQUIRED_PLACEHOLDER
from .runtime_settings import (
    AwsSettings,
    ConfigurationVersionSettings,
    EngineSettings,
    KafkaQueueSettings,
    LoggingSettings,
    ProcessingSettings,
    QueueSettings,
    StorageSettings,
    VariableSettings,
    WorkerConfiguration,
    WorkspaceSettings,
)

QUEUE_BACKENDS = ("sqs", "kafka")
ACKNOWLEDGEMENT_POLICIES = ("always", "on_success")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> WorkerConfiguration:
    """Load and validate the worker configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    configuration = parse_configuration(parsed, path=path)
    logging.getLogger(__name__).debug("Loaded worker configuration from %s", path)
    return configuration


def parse_configuration(
    parsed: Mapping[str, Any], *, path: Path | None = None
) -> WorkerConfiguration:
    """Validate an already parsed configuration mapping."""
    queue = _parse_queue_section(parsed.get("queue"))
    processing = _parse_processing_section(parsed.get("processing"))
    if queue.backend == "kafka" and processing.acknowledgement == "on_success":
        # Kafka commits are cumulative; a later commit would skip the failed record.
        raise ConfigurationError(
            "processing.acknowledgement 'on_success' is not supported with the kafka backend."
        )
    return WorkerConfiguration(
        path=path,
        aws=_parse_aws_section(parsed.get("aws")),
        queue=queue,
        storage=_parse_storage_section(parsed.get("storage")),
        variables=_parse_variables_section(parsed.get("variables")),
        configuration_versions=_parse_configuration_versions_section(
            parsed.get("configuration_versions")
        ),
        workspace=_parse_workspace_section(parsed.get("workspace")),
        engine=_parse_engine_section(parsed.get("engine")),
        processing=processing,
        logging=_parse_logging_section(parsed.get("logging")),
    )


def _parse_aws_section(value: Any) -> AwsSettings:
    section = _optional_mapping(value, "aws")
    region = _require_non_empty_string(section.get("region", "ca-central-1"), "aws.region")
    endpoint_url = _optional_string(section.get("endpoint_url"), "aws.endpoint_url")
    return AwsSettings(region=region, endpoint_url=endpoint_url)


def _parse_queue_section(value: Any) -> QueueSettings:
    section = _optional_mapping(value, "queue")
    backend = _require_choice(section.get("backend", "sqs"), "queue.backend", QUEUE_BACKENDS)
    url = _optional_string(section.get("url"), "queue.url")
    max_messages = _require_int_in_range(
        section.get("max_messages", 5), "queue.max_messages", minimum=1, maximum=10
    )
    wait_time_seconds = _require_int_in_range(
        section.get("wait_time_seconds", 10), "queue.wait_time_seconds", minimum=0, maximum=20
    )
    kafka: KafkaQueueSettings | None = None
    if backend == "sqs" and url is None:
        raise ConfigurationError("queue.url is required for the sqs backend.")
    if url == REQUIRED_PLACEHOLDER:
        raise ConfigurationError(
            f"queue.url still holds the {REQUIRED_PLACEHOLDER} placeholder; set the queue URL."
        )
    if backend == "kafka":
        kafka = _parse_kafka_section(section.get("kafka"))
    return QueueSettings(
        backend=backend,
        url=url,
        max_messages=max_messages,
        wait_time_seconds=wait_time_seconds,
        kafka=kafka,
    )


def _parse_kafka_section(value: Any) -> KafkaQueueSettings:
    section = _require_mapping(value, "queue.kafka")
    bootstrap_servers = _normalize_bootstrap_servers(section.get("bootstrap_servers"))
    topic = _require_non_empty_string(section.get("topic"), "queue.kafka.topic")
    group_id = _require_non_empty_string(
        section.get("group_id", "tfc-run-worker"), "queue.kafka.group_id"
    )
    security = section.get("security") or {}
    if not isinstance(security, Mapping):
        raise ConfigurationError("queue.kafka.security must be a mapping.")
    return KafkaQueueSettings(
        bootstrap_servers=bootstrap_servers,
        topic=topic,
        group_id=group_id,
        security=dict(security),
    )


def _parse_storage_section(value: Any) -> StorageSettings:
    section = _optional_mapping(value, "storage")
    bucket = _require_non_empty_string(
        section.get("bucket", "tfc-configuration-files"), "storage.bucket"
    )
    return StorageSettings(bucket=bucket)


def _parse_variables_section(value: Any) -> VariableSettings:
    section = _optional_mapping(value, "variables")
    return VariableSettings(
        table=_require_non_empty_string(section.get("table", "vars"), "variables.table"),
        partition_key=_require_non_empty_string(
            section.get("partition_key", "workspace-id"), "variables.partition_key"
        ),
    )


def _parse_configuration_versions_section(value: Any) -> ConfigurationVersionSettings:
    section = _optional_mapping(value, "configuration_versions")
    return ConfigurationVersionSettings(
        table=_require_non_empty_string(
            section.get("table", "configuration-versions"), "configuration_versions.table"
        ),
    )


def _parse_workspace_section(value: Any) -> WorkspaceSettings:
    section = _optional_mapping(value, "workspace")
    root = _require_non_empty_string(section.get("root", "~/tf-config"), "workspace.root")
    download_dir = _require_non_empty_string(
        section.get("download_dir", "~"), "workspace.download_dir"
    )
    return WorkspaceSettings(root=_expand_path(root), download_dir=_expand_path(download_dir))


def _parse_engine_section(value: Any) -> EngineSettings:
    section = _optional_mapping(value, "engine")
    version = _require_non_empty_string(section.get("version", "1.9.6"), "engine.version")
    binary_path = _require_non_empty_string(
        section.get("binary_path", "~/.bin/terraform"), "engine.binary_path"
    )
    install_dir = _require_non_empty_string(
        section.get("install_dir", "/opt/tfc-cache/terraform"), "engine.install_dir"
    )
    variable_prefix = section.get("variable_prefix", "TF_VAR_")
    if not isinstance(variable_prefix, str):
        raise ConfigurationError("engine.variable_prefix must be a string.")
    return EngineSettings(
        version=version,
        binary_path=_expand_path(binary_path),
        install_dir=_expand_path(install_dir),
        use_install_cache=_require_bool(
            section.get("use_install_cache", True), "engine.use_install_cache"
        ),
        variable_prefix=variable_prefix,
        command_timeout_seconds=_require_int_in_range(
            section.get("command_timeout_seconds", 1800),
            "engine.command_timeout_seconds",
            minimum=1,
        ),
        plan_enabled=_require_bool(section.get("plan_enabled", False), "engine.plan_enabled"),
    )


def _parse_processing_section(value: Any) -> ProcessingSettings:
    section = _optional_mapping(value, "processing")
    return ProcessingSettings(
        acknowledgement=_require_choice(
            section.get("acknowledgement", "always"),
            "processing.acknowledgement",
            ACKNOWLEDGEMENT_POLICIES,
        ),
        record_run_status=_require_bool(
            section.get("record_run_status", False), "processing.record_run_status"
        ),
    )


def _parse_logging_section(value: Any) -> LoggingSettings:
    section = _optional_mapping(value, "logging")
    level = _require_non_empty_string(section.get("level", "INFO"), "logging.level").upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(f"logging.level must be one of: {', '.join(LOG_LEVELS)}.")
    return LoggingSettings(level=level)


def _normalize_bootstrap_servers(value: Any) -> tuple[str, ...]:
    if value is None:
        raise ConfigurationError("queue.kafka.bootstrap_servers is required.")
    servers: list[str] = []
    if isinstance(value, str):
        servers = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, Sequence):
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError("queue.kafka.bootstrap_servers entries must be strings.")
            stripped = item.strip()
            if stripped:
                servers.append(stripped)
    else:
        raise ConfigurationError(
            "queue.kafka.bootstrap_servers must be a string or list of strings."
        )
    if not servers:
        raise ConfigurationError("queue.kafka.bootstrap_servers must contain at least one server.")
    return tuple(servers)


def _expand_path(raw_path: str) -> Path:
    return Path(raw_path).expanduser()


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    return _require_mapping(value, section_name)


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_choice(value: Any, field_name: str, choices: Sequence[str]) -> str:
    normalized = _require_non_empty_string(value, field_name).lower()
    if normalized not in choices:
        raise ConfigurationError(f"{field_name} must be one of: {', '.join(choices)}.")
    return normalized


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_int_in_range(
    value: Any, field_name: str, *, minimum: int, maximum: int | None = None
) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value < minimum:
        raise ConfigurationError(f"{field_name} must be at least {minimum}.")
    if maximum is not None and value > maximum:
        raise ConfigurationError(f"{field_name} must be at most {maximum}.")
    return value
