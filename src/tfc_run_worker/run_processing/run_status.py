"""Write run outcomes back to the configuration version record."""

from __future__ import annotations

from typing import Protocol

from tfc_run_worker.config_versions import ConfigurationVersionStore

from .run_contracts import RunOutcome


class RunStatusRecorder(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for sinks receiving the outcome of decoded runs."""

    def record(self, outcome: RunOutcome) -> None: ...


class ConfigurationVersionStatusRecorder:  # pylint: disable=too-few-public-methods
    """Store the run status on the configuration version the run was for."""

    def __init__(self, store: ConfigurationVersionStore) -> None:
        self._store = store

    def record(self, outcome: RunOutcome) -> None:
        if outcome.request is None:
            return
        self._store.record_run_status(
            outcome.request.config_version_id, outcome.status.value, outcome.reason
        )
