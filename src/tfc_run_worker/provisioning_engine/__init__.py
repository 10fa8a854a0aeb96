"""Provisioning engine exports."""

from .terraform_adapter import EngineResult, PlanResult, ProvisioningEngineError, TerraformAdapter

__all__ = ["EngineResult", "PlanResult", "ProvisioningEngineError", "TerraformAdapter"]
