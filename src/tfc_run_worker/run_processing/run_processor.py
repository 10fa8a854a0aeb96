"""Run processing use-case service."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from tfc_run_worker.bundle_storage import BundleFetchError, BundleStore, download_bundle
from tfc_run_worker.config_versions import ConfigurationVersionStoreError
from tfc_run_worker.execution_environment import (
    ArchiveExtractionError,
    EngineVersionError,
    EngineVersionSelector,
    EnvironmentBusyError,
    ExecutionEnvironmentManager,
)
from tfc_run_worker.process_execution import CommandTimeoutError
from tfc_run_worker.provisioning_engine import (
    PlanResult,
    ProvisioningEngineError,
    TerraformAdapter,
)
from tfc_run_worker.run_requests import (
    QueueMessage,
    RunRequest,
    RunRequestDecodeError,
    decode_run_request,
)
from tfc_run_worker.timing import timed
from tfc_run_worker.workspace_variables import (
    DEFAULT_VARIABLE_PREFIX,
    VariableResolutionError,
    VariableResolver,
    export_variables,
)

from .run_contracts import RunOutcome, RunStage
from .run_status import RunStatusRecorder

logger = logging.getLogger(__name__)

_RUN_FAILURES = (
    BundleFetchError,
    ArchiveExtractionError,
    EngineVersionError,
    ProvisioningEngineError,
    CommandTimeoutError,
    EnvironmentBusyError,
    OSError,
    ValueError,
)


class RunProcessor:  # pylint: disable=too-many-instance-attributes
    """Drive one run request from message body to cleaned-up environment.

    The first hard failure ends the run as FAILED after cleanup. Variable
    resolution failures are tolerated and the run continues without
    workspace variables. The processor never acknowledges messages.
    """

    def __init__(
        self,
        *,
        bundle_store: BundleStore,
        variable_resolver: VariableResolver,
        environment_manager: ExecutionEnvironmentManager,
        version_selector: EngineVersionSelector,
        engine: TerraformAdapter,
        binary_path: Path,
        variable_prefix: str = DEFAULT_VARIABLE_PREFIX,
        plan_enabled: bool = False,
        status_recorder: RunStatusRecorder | None = None,
        base_environment: Mapping[str, str] | None = None,
    ) -> None:
        self._bundle_store = bundle_store
        self._variable_resolver = variable_resolver
        self._environments = environment_manager
        self._version_selector = version_selector
        self._engine = engine
        self._binary_path = binary_path
        self._variable_prefix = variable_prefix
        self._plan_enabled = plan_enabled
        self._status_recorder = status_recorder
        self._base_environment = base_environment

    def process(self, message: QueueMessage) -> RunOutcome:
        with timed("process-run-message"):
            logger.info("Processing message with ID=%s", message.message_id)
            try:
                request = decode_run_request(message.body)
            except RunRequestDecodeError as exc:
                logger.error("Poison message %s: %s", message.message_id, exc)
                return RunOutcome.poison(message.message_id, str(exc))

            logger.info(
                "configVersionId=%s, configVersionS3ObjectKey=%s, workspaceId=%s",
                request.config_version_id,
                request.config_bundle_key,
                request.workspace_id,
            )
            outcome = self._execute(message.message_id, request)
            self._record(outcome)
            return outcome

    def _execute(self, message_id: str, request: RunRequest) -> RunOutcome:
        stage = RunStage.DECODED
        plan: PlanResult | None = None
        try:
            with self._environments.acquire(request.config_bundle_key) as environment:
                download_bundle(
                    self._bundle_store, request.config_bundle_key, environment.bundle_path
                )
                stage = RunStage.BUNDLE_FETCHED

                self._environments.extract(
                    environment.bundle_path, self._environments.resolve_root()
                )
                stage = RunStage.BUNDLE_EXTRACTED

                self._version_selector.select(environment.engine_version)
                stage = RunStage.ENGINE_VERSION_SELECTED

                engine_environment = self._engine_environment(request.workspace_id)
                stage = RunStage.VARIABLES_RESOLVED

                self._engine.initialize(
                    environment.root_path, self._binary_path, engine_environment
                )
                stage = RunStage.ENGINE_INITIALIZED

                if self._plan_enabled:
                    plan = self._engine.plan(
                        environment.root_path, self._binary_path, engine_environment
                    )
                    stage = RunStage.PLANNED
                    logger.info(
                        "Plan for configuration version %s has changes: %s",
                        request.config_version_id,
                        plan.has_changes,
                    )
        except _RUN_FAILURES as exc:
            logger.error(
                "Run for configuration version %s failed after stage %s: %s",
                request.config_version_id,
                stage.value,
                exc,
            )
            return RunOutcome.failed(message_id, request, stage, str(exc))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception(
                "Unexpected error in run for configuration version %s", request.config_version_id
            )
            return RunOutcome.failed(message_id, request, stage, f"Unexpected error: {exc}")

        logger.info("Run for configuration version %s succeeded", request.config_version_id)
        return RunOutcome.succeeded(message_id, request, plan=plan)

    def _engine_environment(self, workspace_id: str) -> dict[str, str]:
        try:
            with timed("set-workspace-variables"):
                variables = self._variable_resolver.get_variables(workspace_id)
        except VariableResolutionError as exc:
            logger.error("Could not retrieve variables for workspace %s: %s", workspace_id, exc)
            variables = []
        exported = export_variables(variables, prefix=self._variable_prefix)
        logger.info("Exporting %d variables for workspace %s", len(exported), workspace_id)
        base = os.environ if self._base_environment is None else self._base_environment
        return {**base, **exported}

    def _record(self, outcome: RunOutcome) -> None:
        if self._status_recorder is None:
            return
        try:
            self._status_recorder.record(outcome)
        except ConfigurationVersionStoreError as exc:
            logger.error(
                "Could not record run status for message %s: %s", outcome.message_id, exc
            )
