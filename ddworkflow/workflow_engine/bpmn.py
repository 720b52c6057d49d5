"""BPMN parsing on top of SpiffWorkflow."""

from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Tuple

from lxml import etree
from SpiffWorkflow.bpmn.parser.BpmnParser import BpmnParser
from SpiffWorkflow.bpmn.workflow import BpmnWorkflow
from SpiffWorkflow.exceptions import SpiffWorkflowException

from ddworkflow.workflow_engine.exceptions import BpmnParseError

BPMN_SUFFIXES = (".bpmn", ".bpmn20.xml")
BPMN_NAMESPACES = {"bpmn": "http://www.omg.org/spec/BPMN/20100524/MODEL"}

_XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


class BpmnDocument(NamedTuple):
    """A parsed resource and the ids of the processes it can run."""

    parser: BpmnParser
    process_ids: List[str]


def is_bpmn_resource(name: str) -> bool:
    return name.lower().endswith(BPMN_SUFFIXES)


def parse_bpmn(content: bytes, resource_name: str) -> BpmnDocument:
    """Load a BPMN document into a fresh parser.

    Processes marked ``isExecutable="false"`` are skipped. Raises
    BpmnParseError for malformed XML, invalid models, or a document with
    nothing executable in it.
    """

    parser = BpmnParser()
    try:
        document = etree.fromstring(content, parser=_XML_PARSER)
        parser.add_bpmn_xml(document, filename=resource_name)
    except etree.XMLSyntaxError as exc:
        raise BpmnParseError(f"Resource '{resource_name}' is not well-formed XML: {exc}") from exc
    except SpiffWorkflowException as exc:
        raise BpmnParseError(f"Resource '{resource_name}' is not a valid BPMN model: {exc}") from exc

    process_ids = [
        process.get("id")
        for process in document.xpath(".//bpmn:process", namespaces=BPMN_NAMESPACES)
        if process.get("isExecutable", "true").strip().lower() != "false"
    ]
    if not process_ids:
        raise BpmnParseError(f"Resource '{resource_name}' contains no executable process")
    return BpmnDocument(parser=parser, process_ids=process_ids)


def load_process_spec(parser: BpmnParser, process_id: str, resource_name: str) -> Tuple[Any, Dict[str, Any]]:
    """Return the process spec and the call-activity specs it depends on."""

    try:
        spec = parser.get_spec(process_id)
        subprocess_specs = parser.get_subprocess_specs(process_id)
    except SpiffWorkflowException as exc:
        raise BpmnParseError(f"Process '{process_id}' in '{resource_name}' is invalid: {exc}") from exc
    return spec, subprocess_specs


def process_name(spec: Any, process_id: str) -> str:
    return getattr(spec, "description", None) or process_id


def create_workflow(parser: BpmnParser, process_id: str, resource_name: str) -> BpmnWorkflow:
    spec, subprocess_specs = load_process_spec(parser, process_id, resource_name)
    return BpmnWorkflow(spec, subprocess_specs)
