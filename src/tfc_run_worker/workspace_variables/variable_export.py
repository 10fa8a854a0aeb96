"""Translate workspace variables into a process environment."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .variable_models import Variable, VariableCategory

logger = logging.getLogger(__name__)

DEFAULT_VARIABLE_PREFIX = "TF_VAR_"


def export_variables(
    variables: Iterable[Variable], *, prefix: str = DEFAULT_VARIABLE_PREFIX
) -> dict[str, str]:
    """Return the environment entries for `variables`.

    Environment variables keep their key, provisioning-tool variables get
    `prefix` prepended. Variables of unknown categories are skipped, and when
    two variables map to the same name the first one is kept.
    """
    exported: dict[str, str] = {}
    for variable in variables:
        category = variable.known_category
        if category is VariableCategory.ENVIRONMENT:
            name = variable.key
        elif category is VariableCategory.PROVISIONING_TOOL:
            name = f"{prefix}{variable.key}"
        else:
            logger.warning(
                "Skipping variable %s with unexpected category '%s'",
                variable.key,
                variable.category,
            )
            continue
        if name in exported:
            logger.warning(
                "Ignoring duplicate variable %s in workspace %s", name, variable.workspace_id
            )
            continue
        exported[name] = variable.value
    return exported
