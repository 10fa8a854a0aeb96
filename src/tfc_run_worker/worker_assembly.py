"""Construct the worker's clients and services from configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import boto3

from tfc_run_worker.bundle_storage import S3BundleStore
from tfc_run_worker.config_versions import ConfigurationVersionStore
from tfc_run_worker.configuration import AwsSettings, WorkerConfiguration
from tfc_run_worker.execution_environment import (
    EngineVersionSelector,
    ExecutionEnvironmentManager,
)
from tfc_run_worker.process_execution import ProcessExecutor, SubprocessExecutor
from tfc_run_worker.provisioning_engine import TerraformAdapter
from tfc_run_worker.run_processing import ConfigurationVersionStatusRecorder, RunProcessor
from tfc_run_worker.run_requests import KafkaRunRequestQueue, RunRequestQueue, SqsRunRequestQueue
from tfc_run_worker.worker_loop import AcknowledgementPolicy, RunWorker
from tfc_run_worker.workspace_variables import DynamoDbVariableResolver

ClientFactory = Callable[[str], Any]


def aws_client_factory(settings: AwsSettings) -> ClientFactory:
    """Return a factory building boto3 clients for the configured region and endpoint."""

    def _create(service_name: str) -> Any:
        kwargs: dict[str, Any] = {"region_name": settings.region}
        if settings.endpoint_url:
            kwargs["endpoint_url"] = settings.endpoint_url
        return boto3.client(service_name, **kwargs)

    return _create


def build_run_request_queue(
    configuration: WorkerConfiguration, client_factory: ClientFactory
) -> RunRequestQueue:
    queue_settings = configuration.queue
    if queue_settings.backend == "kafka":
        if queue_settings.kafka is None:
            raise ValueError("Kafka queue settings are missing.")
        return KafkaRunRequestQueue(queue_settings.kafka)
    if queue_settings.url is None:
        raise ValueError("SQS queue url is missing.")
    return SqsRunRequestQueue(queue_settings.url, client_factory("sqs"))


def build_run_processor(
    configuration: WorkerConfiguration,
    client_factory: ClientFactory,
    *,
    executor: ProcessExecutor | None = None,
) -> RunProcessor:
    engine = configuration.engine
    process_executor = executor or SubprocessExecutor()
    status_recorder = None
    if configuration.processing.record_run_status:
        status_recorder = ConfigurationVersionStatusRecorder(
            ConfigurationVersionStore(
                configuration.configuration_versions.table, client_factory("dynamodb")
            )
        )
    return RunProcessor(
        bundle_store=S3BundleStore(configuration.storage.bucket, client_factory("s3")),
        variable_resolver=DynamoDbVariableResolver(
            configuration.variables.table,
            client_factory("dynamodb"),
            partition_key=configuration.variables.partition_key,
        ),
        environment_manager=ExecutionEnvironmentManager(
            root=configuration.workspace.root,
            download_dir=configuration.workspace.download_dir,
            engine_version=engine.version,
        ),
        version_selector=EngineVersionSelector(
            process_executor,
            install_dir=engine.install_dir,
            use_cache=engine.use_install_cache,
            timeout_seconds=engine.command_timeout_seconds,
        ),
        engine=TerraformAdapter(process_executor, timeout_seconds=engine.command_timeout_seconds),
        binary_path=engine.binary_path,
        variable_prefix=engine.variable_prefix,
        plan_enabled=engine.plan_enabled,
        status_recorder=status_recorder,
    )


def build_run_worker(
    configuration: WorkerConfiguration,
    *,
    client_factory: ClientFactory | None = None,
    queue: RunRequestQueue | None = None,
    executor: ProcessExecutor | None = None,
) -> RunWorker:
    factory = client_factory or aws_client_factory(configuration.aws)
    return RunWorker(
        queue or build_run_request_queue(configuration, factory),
        build_run_processor(configuration, factory, executor=executor),
        max_messages=configuration.queue.max_messages,
        wait_time_seconds=configuration.queue.wait_time_seconds,
        acknowledgement=AcknowledgementPolicy(configuration.processing.acknowledgement),
    )
