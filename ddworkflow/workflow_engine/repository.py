"""Deployment of process resources into the engine's repository."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ddworkflow.core.database import session_scope
from ddworkflow.models.deployment import Deployment, DeploymentResource, ProcessDefinition
from ddworkflow.workflow_engine import bpmn
from ddworkflow.workflow_engine.descriptors import DeploymentInfo, ProcessDefinitionInfo
from ddworkflow.workflow_engine.exceptions import ProcessEngineError, ResourceNotFoundError

if TYPE_CHECKING:
    from ddworkflow.workflow_engine.engine import ProcessEngine

LOGGER = logging.getLogger("ddworkflow.workflow_engine.repository")


def _definition_info(definition: ProcessDefinition) -> ProcessDefinitionInfo:
    return ProcessDefinitionInfo(
        id=definition.id,
        key=definition.key,
        version=definition.version,
        name=definition.name,
        resource_name=definition.resource_name,
    )


class DeploymentBuilder:
    """Collects resources for a single deployment."""

    def __init__(self, repository: "RepositoryService") -> None:
        self._repository = repository
        self._name: Optional[str] = None
        self._resources: Dict[str, bytes] = {}

    def name(self, name: str) -> "DeploymentBuilder":
        self._name = name
        return self

    def add_classpath_resource(self, resource_name: str) -> "DeploymentBuilder":
        """Read ``resource_name`` from the engine classpath right away."""

        resource = self._repository.engine.classpath.find(resource_name)
        if resource is None:
            raise ResourceNotFoundError(f"Resource '{resource_name}' not found on classpath")
        self._resources[resource_name] = resource.read_bytes()
        return self

    def deploy(self) -> DeploymentInfo:
        return self._repository.deploy(name=self._name, resources=dict(self._resources))


class RepositoryService:
    """Registers deployments and looks up process definitions."""

    def __init__(self, engine: "ProcessEngine") -> None:
        self.engine = engine

    def create_deployment(self) -> DeploymentBuilder:
        self.engine.ensure_open()
        return DeploymentBuilder(self)

    def deploy(self, *, name: Optional[str], resources: Dict[str, bytes]) -> DeploymentInfo:
        """Persist ``resources`` and register every executable process they contain.

        Each process id becomes a new definition version; nothing is written
        unless all BPMN resources parse.
        """

        self.engine.ensure_open()
        if not resources:
            raise ProcessEngineError("Deployment must contain at least one resource")

        # (key, name, resource name) for every executable process
        processes: List[tuple[str, str, str]] = []
        for resource_name, content in resources.items():
            if not bpmn.is_bpmn_resource(resource_name):
                continue
            document = bpmn.parse_bpmn(content, resource_name)
            for process_id in document.process_ids:
                spec, _ = bpmn.load_process_spec(document.parser, process_id, resource_name)
                processes.append((process_id, bpmn.process_name(spec, process_id), resource_name))

        with session_scope(self.engine.session_factory) as session:
            deployment = Deployment(name=name)
            deployment.resources = [
                DeploymentResource(name=resource_name, content=content)
                for resource_name, content in resources.items()
            ]
            session.add(deployment)
            session.flush()

            definitions = []
            for key, process_name, resource_name in processes:
                version = self._next_version(session, key)
                definition = ProcessDefinition(
                    id=f"{key}:{version}:{uuid.uuid4()}",
                    key=key,
                    version=version,
                    name=process_name,
                    resource_name=resource_name,
                    deployment_id=deployment.id,
                )
                session.add(definition)
                session.flush()
                definitions.append(_definition_info(definition))

            info = DeploymentInfo(
                id=deployment.id,
                name=deployment.name,
                resource_names=tuple(resources),
                definitions=tuple(definitions),
            )

        LOGGER.info(
            "Deployment %s registered %d process definition(s)",
            info.id,
            len(info.definitions),
            extra={"deployment_id": str(info.id), "definitions": [d.id for d in info.definitions]},
        )
        return info

    def get_latest_definition(self, key: str) -> Optional[ProcessDefinitionInfo]:
        self.engine.ensure_open()
        with session_scope(self.engine.session_factory) as session:
            definition = self._latest(session, key)
            return _definition_info(definition) if definition else None

    def get_resource_content(self, definition_id: str) -> bytes:
        """Return the deployed bytes of the resource a definition came from."""

        self.engine.ensure_open()
        with session_scope(self.engine.session_factory) as session:
            content = session.scalar(
                select(DeploymentResource.content)
                .join(ProcessDefinition, ProcessDefinition.deployment_id == DeploymentResource.deployment_id)
                .where(ProcessDefinition.id == definition_id)
                .where(DeploymentResource.name == ProcessDefinition.resource_name)
            )
        if content is None:
            raise ResourceNotFoundError(f"No deployed resource for process definition '{definition_id}'")
        return content

    @staticmethod
    def _latest(session: Session, key: str) -> Optional[ProcessDefinition]:
        return session.scalar(
            select(ProcessDefinition)
            .where(ProcessDefinition.key == key)
            .order_by(ProcessDefinition.version.desc())
            .limit(1)
        )

    @staticmethod
    def _next_version(session: Session, key: str) -> int:
        current = session.scalar(select(func.max(ProcessDefinition.version)).where(ProcessDefinition.key == key))
        return (current or 0) + 1
