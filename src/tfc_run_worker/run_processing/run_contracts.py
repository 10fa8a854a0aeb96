"""Run processing entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tfc_run_worker.provisioning_engine import PlanResult
from tfc_run_worker.run_requests import RunRequest


class RunStage(str, Enum):
    """Pipeline stages in execution order."""

    RECEIVED = "received"
    DECODED = "decoded"
    BUNDLE_FETCHED = "bundle_fetched"
    BUNDLE_EXTRACTED = "bundle_extracted"
    ENGINE_VERSION_SELECTED = "engine_version_selected"
    VARIABLES_RESOLVED = "variables_resolved"
    ENGINE_INITIALIZED = "engine_initialized"
    PLANNED = "planned"
    CLEANED_UP = "cleaned_up"


class RunStatus(str, Enum):
    """Terminal result of processing one run request."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    POISON_MESSAGE = "poison_message"


@dataclass(frozen=True)
class RunOutcome:  # pylint: disable=too-many-instance-attributes
    """Outcome of one processed message.

    `stage` is the last stage the run completed before it ended.
    """

    status: RunStatus
    message_id: str
    stage: RunStage
    request: RunRequest | None = None
    reason: str | None = None
    plan: PlanResult | None = None

    @property
    def is_success(self) -> bool:
        return self.status is RunStatus.SUCCEEDED

    @staticmethod
    def succeeded(
        message_id: str, request: RunRequest, *, plan: PlanResult | None = None
    ) -> RunOutcome:
        return RunOutcome(
            status=RunStatus.SUCCEEDED,
            message_id=message_id,
            stage=RunStage.CLEANED_UP,
            request=request,
            plan=plan,
        )

    @staticmethod
    def failed(message_id: str, request: RunRequest, stage: RunStage, reason: str) -> RunOutcome:
        return RunOutcome(
            status=RunStatus.FAILED,
            message_id=message_id,
            stage=stage,
            request=request,
            reason=reason,
        )

    @staticmethod
    def poison(message_id: str, reason: str) -> RunOutcome:
        return RunOutcome(
            status=RunStatus.POISON_MESSAGE,
            message_id=message_id,
            stage=RunStage.RECEIVED,
            reason=reason,
        )
