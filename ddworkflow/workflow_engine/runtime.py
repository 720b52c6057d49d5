"""Starting process instances."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

from SpiffWorkflow.bpmn.serializer.workflow import BpmnWorkflowSerializer
from SpiffWorkflow.bpmn.workflow import BpmnWorkflow
from SpiffWorkflow.exceptions import SpiffWorkflowException
from SpiffWorkflow.util.task import TaskState

from ddworkflow.core.database import session_scope
from ddworkflow.models.process_instance import ProcessInstance
from ddworkflow.workflow_engine import bpmn
from ddworkflow.workflow_engine.descriptors import ProcessDefinitionInfo, ProcessInstanceInfo
from ddworkflow.workflow_engine.exceptions import ProcessDefinitionNotFoundError, ProcessEngineError

if TYPE_CHECKING:
    from ddworkflow.workflow_engine.engine import ProcessEngine

LOGGER = logging.getLogger("ddworkflow.workflow_engine.runtime")


class RuntimeService:
    """Creates and persists process instances."""

    def __init__(self, engine: "ProcessEngine") -> None:
        self.engine = engine
        self._serializer = BpmnWorkflowSerializer()

    def start_process_instance_by_key(
        self,
        key: str,
        *,
        business_key: Optional[str] = None,
        variables: Optional[Mapping[str, Any]] = None,
    ) -> ProcessInstanceInfo:
        """Start the latest version of the process definition ``key``.

        ``variables`` become the start event's task data. The instance runs
        synchronously until it completes or reaches a wait state, then its
        state is persisted.
        """

        self.engine.ensure_open()
        definition = self.engine.repository_service.get_latest_definition(key)
        if definition is None:
            raise ProcessDefinitionNotFoundError(f"No process definition deployed with key '{key}'")

        content = self.engine.repository_service.get_resource_content(definition.id)
        document = bpmn.parse_bpmn(content, definition.resource_name)
        workflow = bpmn.create_workflow(document.parser, definition.key, definition.resource_name)
        if variables:
            for task in workflow.get_tasks(state=TaskState.READY):
                task.data.update(variables)
        self._run(workflow, definition)

        try:
            state = json.loads(self._serializer.serialize_json(workflow))
        except (TypeError, ValueError) as exc:
            raise ProcessEngineError(f"Could not serialize state of process '{definition.id}': {exc}") from exc

        ended = workflow.is_completed()
        with session_scope(self.engine.session_factory) as session:
            instance = ProcessInstance(
                process_definition_id=definition.id,
                business_key=business_key,
                ended=ended,
                suspended=False,
                state=state,
            )
            session.add(instance)
            session.flush()
            info = ProcessInstanceInfo(
                id=instance.id,
                process_definition_key=definition.key,
                process_definition_id=definition.id,
                business_key=instance.business_key,
                ended=instance.ended,
                suspended=instance.suspended,
            )

        LOGGER.info(
            "Process instance %s started for %s",
            info.id,
            definition.id,
            extra={"process_instance_id": str(info.id), "ended": info.ended},
        )
        return info

    def _run(self, workflow: BpmnWorkflow, definition: ProcessDefinitionInfo) -> None:
        try:
            workflow.do_engine_steps()
            if self.engine.config.job_executor_activate:
                # Fire due timers and continue as far as the engine can go.
                workflow.refresh_waiting_tasks()
                workflow.do_engine_steps()
        except SpiffWorkflowException as exc:
            raise ProcessEngineError(f"Process '{definition.id}' failed while running: {exc}") from exc
