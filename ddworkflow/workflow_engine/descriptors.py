"""Read-only descriptors returned by the process engine services."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ProcessDefinitionInfo:
    """A deployed process definition version."""

    id: str
    key: str
    version: int
    name: Optional[str]
    resource_name: str


@dataclass(frozen=True)
class DeploymentInfo:
    """Result of a deployment call."""

    id: uuid.UUID
    name: Optional[str]
    resource_names: Tuple[str, ...]
    definitions: Tuple[ProcessDefinitionInfo, ...]


@dataclass(frozen=True)
class ProcessInstanceInfo:
    """State of a process instance as of the end of the starting call."""

    id: uuid.UUID
    process_definition_key: str
    process_definition_id: str
    business_key: Optional[str]
    ended: bool
    suspended: bool
