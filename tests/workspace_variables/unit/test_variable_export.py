"""Variable export tests."""

from __future__ import annotations

import logging

import pytest
from tfc_run_worker.workspace_variables.variable_export import export_variables
from tfc_run_worker.workspace_variables.variable_models import Variable, VariableCategory


def _variable(key: str, value: str, category: str) -> Variable:
    return Variable(id=f"var-{key}", workspace_id="ws-1", category=category, key=key, value=value)


def test_environment_variables_keep_their_key_and_tool_variables_get_prefix() -> None:
    exported = export_variables(
        [_variable("FOO", "bar", "env"), _variable("region", "ca-central-1", "terraform")]
    )

    assert exported == {"FOO": "bar", "TF_VAR_region": "ca-central-1"}


def test_custom_prefix_is_applied_to_tool_variables_only() -> None:
    exported = export_variables(
        [_variable("FOO", "bar", "env"), _variable("size", "3", "terraform")],
        prefix="ENGINE_",
    )

    assert exported == {"FOO": "bar", "ENGINE_size": "3"}


def test_unknown_categories_produce_no_entry_and_no_failure(
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING):
        exported = export_variables(
            [_variable("FOO", "bar", "env"), _variable("X", "y", "policy-set")]
        )

    assert exported == {"FOO": "bar"}
    assert "unexpected category 'policy-set'" in caplog.text


def test_one_entry_per_variable_and_first_duplicate_wins() -> None:
    exported = export_variables(
        [
            _variable("A", "1", "env"),
            _variable("A", "2", "env"),
            _variable("A", "3", "terraform"),
        ]
    )

    assert exported == {"A": "1", "TF_VAR_A": "3"}


def test_categories_map_to_stored_strings() -> None:
    assert VariableCategory("env") is VariableCategory.ENVIRONMENT
    assert VariableCategory("terraform") is VariableCategory.PROVISIONING_TOOL
