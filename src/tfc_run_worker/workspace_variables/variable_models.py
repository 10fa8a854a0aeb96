"""Workspace variable entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class VariableCategory(str, Enum):
    """Variable categories understood by the run pipeline."""

    ENVIRONMENT = "env"
    PROVISIONING_TOOL = "terraform"


@dataclass(frozen=True)
class Variable:  # pylint: disable=too-many-instance-attributes
    """A single workspace-scoped setting.

    `category` keeps the stored string so that variables of categories this
    worker does not know can still be loaded and reported.
    """

    id: str
    workspace_id: str
    category: str
    key: str
    value: str
    sensitive: bool = False

    @property
    def known_category(self) -> VariableCategory | None:
        try:
            return VariableCategory(self.category)
        except ValueError:
            return None
