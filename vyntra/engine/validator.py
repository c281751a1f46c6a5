"""
Workflow document validation.

Shape checks run first (types, required fields, enumerations) through the
Pydantic schemas. When the shape is valid, the cross-reference rules are
checked in one pass over nodes and one over edges, followed by the DAG check.
Every violation is collected; nothing stops at the first error.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ..core.exceptions import WorkflowValidationError
from ..schemas.workflow import WorkflowDocument
from .scheduler import is_dag

_OPENING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"```$")


@dataclass(frozen=True)
class ValidationResult:
    """Either a parsed document (``ok``) or the full list of errors."""

    ok: bool
    document: WorkflowDocument | None = None
    errors: list[str] = field(default_factory=list)


def _format_location(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc) if loc else "document"


def _shape_errors(exc: ValidationError) -> list[str]:
    return [f"{_format_location(err['loc'])}: {err['msg']}" for err in exc.errors()]


def _duplicates(ids: list[str]) -> set[str]:
    seen: set[str] = set()
    dupes: set[str] = set()
    for item in ids:
        if item in seen:
            dupes.add(item)
        seen.add(item)
    return dupes


def _reference_errors(doc: WorkflowDocument) -> list[str]:
    workflow = doc.workflow
    errors: list[str] = []

    triggers = [n for n in workflow.nodes if n.is_trigger]
    if len(triggers) != 1:
        errors.append("workflow.nodes: Exactly one trigger node is required.")
    if triggers and workflow.entry_node_id != triggers[0].id:
        errors.append("workflow.entry_node_id: entry_node_id must point to the trigger node.")

    node_ids: set[str] = set()
    for index, node in enumerate(workflow.nodes):
        path = f"workflow.nodes.{index}"
        if node.id in node_ids:
            errors.append(f"{path}.id: Duplicate node id: {node.id}")
        node_ids.add(node.id)

        if node.is_trigger and node.inputs:
            errors.append(f"{path}.inputs: Trigger node {node.id} must have no inputs.")
        if not node.is_trigger and not node.inputs:
            errors.append(f"{path}.inputs: Non-trigger node {node.id} must have at least one input.")

        for port_id in sorted(_duplicates(node.input_ids)):
            errors.append(f"{path}.inputs: Duplicate input port id on node {node.id}: {port_id}")
        for port_id in sorted(_duplicates(node.output_ids)):
            errors.append(f"{path}.outputs: Duplicate output port id on node {node.id}: {port_id}")

        if node.type == "logic.condition":
            if len(node.outputs) < 2:
                errors.append(f"{path}.outputs: Condition node {node.id} must have at least two outputs.")
            default_output = node.config.get("default_output")
            if not isinstance(default_output, str) or default_output not in node.output_ids:
                errors.append(
                    f"{path}.config.default_output: "
                    f"Condition node {node.id} default_output must match an output port id."
                )

    nodes_by_id = {n.id: n for n in workflow.nodes}
    edge_ids: set[str] = set()
    for index, edge in enumerate(workflow.edges):
        path = f"workflow.edges.{index}"
        if edge.id in edge_ids:
            errors.append(f"{path}.id: Duplicate edge id: {edge.id}")
        edge_ids.add(edge.id)

        source = nodes_by_id.get(edge.source.node_id)
        if source is None:
            errors.append(f"{path}.source.node_id: Edge {edge.id} source node not found.")
        elif edge.source.port_id not in source.output_ids:
            errors.append(f"{path}.source.port_id: Edge {edge.id} source port must reference an output port.")

        target = nodes_by_id.get(edge.target.node_id)
        if target is None:
            errors.append(f"{path}.target.node_id: Edge {edge.id} target node not found.")
        elif edge.target.port_id not in target.input_ids:
            errors.append(f"{path}.target.port_id: Edge {edge.id} target port must reference an input port.")

    # Duplicate ids collapse in the graph and would read as a cycle.
    if not _duplicates([n.id for n in workflow.nodes]) and not is_dag(workflow):
        errors.append("workflow.edges: Workflow graph is not a DAG (cycle detected).")

    return errors


def validate_workflow_document(raw: Any) -> ValidationResult:
    """
    Validate a raw workflow document.

    ``raw`` may be a mapping, a JSON string/bytes, or an existing
    ``WorkflowDocument`` (re-checked from its dumped form).
    """
    if isinstance(raw, WorkflowDocument):
        raw = raw.to_dict()

    try:
        if isinstance(raw, (str, bytes, bytearray)):
            doc = WorkflowDocument.model_validate_json(raw)
        else:
            doc = WorkflowDocument.model_validate(raw)
    except ValidationError as exc:
        return ValidationResult(ok=False, errors=_shape_errors(exc))

    errors = _reference_errors(doc)
    if errors:
        return ValidationResult(ok=False, errors=errors)
    return ValidationResult(ok=True, document=doc)


def require_valid_document(raw: Any) -> WorkflowDocument:
    """Validate ``raw`` or raise ``WorkflowValidationError`` with every error."""
    result = validate_workflow_document(raw)
    if not result.ok or result.document is None:
        raise WorkflowValidationError(result.errors)
    return result.document


def parse_document_text(text: str) -> ValidationResult:
    """Validate a model-produced document, tolerating surrounding code fences."""
    cleaned = _CLOSING_FENCE.sub("", _OPENING_FENCE.sub("", text.strip())).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        return ValidationResult(ok=False, errors=["$: response is not valid JSON"])
    return validate_workflow_document(parsed)
