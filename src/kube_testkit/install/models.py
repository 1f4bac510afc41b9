"""Resource references, install outcomes and the dry-run collection sink."""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Iterator

import yaml
from pydantic import BaseModel, ConfigDict, Field


class ResourceRef(BaseModel):
    """Identifies a cluster object, or the API type it serves, independent of its body."""

    model_config = ConfigDict(frozen=True)

    group: str = Field(..., description="API group; empty for the core group")
    kind: str
    version: str
    name: str
    namespace: str | None = None

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def __str__(self) -> str:
        scope = f"{self.namespace}/" if self.namespace else ""
        return f"{self.kind}.{self.api_version} {scope}{self.name}"


class InstallationOutcome(str, Enum):
    """What ensure() did for one resource."""

    ALREADY_PRESENT = "already_present"
    INSTALLED = "installed"
    COLLECTED = "collected"


class Collection:
    """Ordered sink for resource bodies that are rendered instead of applied."""

    def __init__(self) -> None:
        self._items: list[dict[str, Any]] = []

    def add(self, body: dict[str, Any]) -> None:
        self._items.append(copy.deepcopy(body))

    @property
    def items(self) -> list[dict[str, Any]]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.items)

    def render(self) -> str:
        """Collected bodies as a multi-document YAML stream, in insertion order."""
        return yaml.safe_dump_all(self._items, sort_keys=False, explicit_start=True)
