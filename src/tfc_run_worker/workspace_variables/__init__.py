"""Workspace variable domain exports."""

from .dynamodb_variable_resolver import (
    DynamoDbVariableResolver,
    VariableResolutionError,
    VariableResolver,
)
from .variable_export import DEFAULT_VARIABLE_PREFIX, export_variables
from .variable_models import Variable, VariableCategory

__all__ = [
    "DEFAULT_VARIABLE_PREFIX",
    "DynamoDbVariableResolver",
    "Variable",
    "VariableCategory",
    "VariableResolutionError",
    "VariableResolver",
    "export_variables",
]
