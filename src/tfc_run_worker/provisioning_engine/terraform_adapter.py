"""Provisioning engine (terraform) invocation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from tfc_run_worker.process_execution import CommandNotFoundError, ProcessExecutor
from tfc_run_worker.timing import timed

logger = logging.getLogger(__name__)

# `plan -detailed-exitcode` exits 2 when the plan contains changes.
PLAN_EXIT_CODE_CHANGES = 2


class ProvisioningEngineError(Exception):
    """Raised when an engine operation fails; carries the captured output when available."""

    def __init__(self, message: str, result: EngineResult | None = None) -> None:
        super().__init__(message)
        self.result = result


@dataclass(frozen=True)
class EngineResult:
    """Captured output of one engine operation."""

    operation: str
    stdout: str
    stderr: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class PlanResult:
    """Plan output kept as text plus whether the plan proposes changes."""

    engine_result: EngineResult
    has_changes: bool

    @property
    def text(self) -> str:
        return self.engine_result.stdout


class TerraformAdapter:
    """Run engine operations against an execution environment root."""

    def __init__(self, executor: ProcessExecutor, *, timeout_seconds: float | None = None) -> None:
        self._executor = executor
        self._timeout_seconds = timeout_seconds

    def initialize(
        self, root: Path, binary_path: Path, env: Mapping[str, str] | None = None
    ) -> EngineResult:
        with timed("terraform-init"):
            result = self._run("init", root, binary_path, env, ("-input=false", "-no-color"))
        if not result.succeeded:
            raise ProvisioningEngineError(
                f"terraform init failed in {root} with exit code {result.exit_code}: "
                f"{result.stderr.strip()}",
                result,
            )
        logger.info("terraform init output: %s", result.stdout.strip())
        return result

    def plan(
        self, root: Path, binary_path: Path, env: Mapping[str, str] | None = None
    ) -> PlanResult:
        """Run a plan after a successful `initialize`."""
        with timed("terraform-plan"):
            result = self._run(
                "plan", root, binary_path, env, ("-input=false", "-no-color", "-detailed-exitcode")
            )
        if result.exit_code not in (0, PLAN_EXIT_CODE_CHANGES):
            raise ProvisioningEngineError(
                f"terraform plan failed in {root} with exit code {result.exit_code}: "
                f"{result.stderr.strip()}",
                result,
            )
        return PlanResult(
            engine_result=result,
            has_changes=result.exit_code == PLAN_EXIT_CODE_CHANGES,
        )

    def _run(
        self,
        operation: str,
        root: Path,
        binary_path: Path,
        env: Mapping[str, str] | None,
        flags: tuple[str, ...],
    ) -> EngineResult:
        try:
            command_result = self._executor.run(
                (str(binary_path), operation, *flags),
                cwd=root,
                env=env,
                timeout_seconds=self._timeout_seconds,
            )
        except CommandNotFoundError as exc:
            raise ProvisioningEngineError(f"terraform {operation} failed: {exc}") from exc
        return EngineResult(
            operation=operation,
            stdout=command_result.stdout,
            stderr=command_result.stderr,
            exit_code=command_result.exit_code,
        )
