"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import ConfigurationError, load_configuration, parse_configuration
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

__all__ = [
    "AwsSettings",
    "ConfigurationVersionSettings",
    "EngineSettings",
    "KafkaQueueSettings",
    "LoggingSettings",
    "ProcessingSettings",
    "QueueSettings",
    "StorageSettings",
    "VariableSettings",
    "WorkerConfiguration",
    "WorkspaceSettings",
    "ConfigurationError",
    "load_configuration",
    "parse_configuration",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
