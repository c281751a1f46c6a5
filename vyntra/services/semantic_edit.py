"""
Semantic edit commands.

A small command language over workflow documents: rename, delete, connect
and add nodes. Every edited candidate is re-validated; a candidate that fails
validation is rejected whole and the original document is left untouched.
"""

from __future__ import annotations

import copy
import math
import re
from dataclasses import dataclass, field
from typing import Any

from ..engine.expression_engine import to_number
from ..engine.node_registry import node_registry, register_all_nodes
from ..engine.validator import validate_workflow_document
from ..schemas.workflow import WorkflowDocument

REJECTED_MESSAGE = "Edit rejected by workflow validator."
USAGE_MESSAGE = (
    "Try commands like: 'add classify at end', 'add delay 30 seconds', "
    "'rename n2 to Score Lead', 'connect n2 to n4'."
)

# First match wins.
NODE_TYPE_ALIASES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"summarize|summary", re.IGNORECASE), "ai.summarize"),
    (re.compile(r"classify|classification|tag", re.IGNORECASE), "ai.classify"),
    (re.compile(r"extract|parse fields", re.IGNORECASE), "ai.extract_fields"),
    (re.compile(r"report|checklist|sop", re.IGNORECASE), "ai.generate_report"),
    (re.compile(r"condition|branch|if", re.IGNORECASE), "logic.condition"),
    (re.compile(r"delay|wait|pause", re.IGNORECASE), "logic.delay"),
    (re.compile(r"db save|database|save to db|save", re.IGNORECASE), "output.db_save"),
    (re.compile(r"export|csv|json|notify|slack", re.IGNORECASE), "output.export"),
]

_RENAME = re.compile(r"^rename\s+(.+?)\s+to\s+(.+)$", re.IGNORECASE)
_DELETE = re.compile(r"^delete\s+(.+)$", re.IGNORECASE)
_CONNECT = re.compile(r"^connect\s+(.+?)\s+to\s+(.+)$", re.IGNORECASE)
_ADD_DELAY = re.compile(r"^add\s+delay\s+(\d+)\s*seconds?$", re.IGNORECASE)

NODE_SPACING_X = 240

RawDoc = dict[str, Any]


@dataclass
class EditResult:
    """Outcome of one command."""

    ok: bool
    message: str
    document: WorkflowDocument | None = None
    errors: list[str] = field(default_factory=list)


def _next_id(items: list[dict[str, Any]], prefix: str) -> str:
    """``<prefix><max+1>`` over ids shaped like ``<prefix><number>``."""
    numbers = [to_number(item["id"][len(prefix):] if item["id"].startswith(prefix) else item["id"]) for item in items]
    finite = [n for n in numbers if math.isfinite(n)]
    highest = int(max(finite)) if finite else 0
    return f"{prefix}{highest + 1}"


def _find_node(doc: RawDoc, ref: str) -> dict[str, Any] | None:
    ref = ref.lower()
    return next(
        (n for n in doc["workflow"]["nodes"] if n["id"].lower() == ref or n["name"].lower() == ref),
        None,
    )


def _new_edge(doc: RawDoc, source: dict[str, Any], target: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": _next_id(doc["workflow"]["edges"], "e"),
        "source": {"node_id": source["id"], "port_id": source["outputs"][0]["id"]},
        "target": {"node_id": target["id"], "port_id": target["inputs"][0]["id"]},
        "label": None,
        "condition": None,
    }


def create_node(node_type: str, node_id: str, position: dict[str, float]) -> dict[str, Any]:
    """A new node of ``node_type`` built from its registered description."""
    if not node_registry.list():
        register_all_nodes()
    desc = node_registry.get(node_type).node_description
    return {
        "id": node_id,
        "type": node_type,
        "name": desc.display_name,
        "position": dict(position),
        "inputs": [port.to_dict() for port in desc.inputs],
        "outputs": [port.to_dict() for port in desc.outputs],
        "config": copy.deepcopy(desc.default_config),
        "ui": {"icon": desc.icon, "color": "neutral"},
    }


def find_type_from_command(command: str) -> str | None:
    for pattern, node_type in NODE_TYPE_ALIASES:
        if pattern.search(command):
            return node_type
    return None


def terminal_nodes(doc: RawDoc) -> list[dict[str, Any]]:
    """Nodes without outgoing edges, in node order."""
    with_outgoing = {e["source"]["node_id"] for e in doc["workflow"]["edges"]}
    return [n for n in doc["workflow"]["nodes"] if n["id"] not in with_outgoing]


def add_node_at_end(doc: RawDoc, node_type: str) -> RawDoc:
    """Append a node after the first terminal node and wire it in."""
    candidate = copy.deepcopy(doc)
    nodes = candidate["workflow"]["nodes"]
    terminals = terminal_nodes(candidate)
    source = terminals[0] if terminals else nodes[-1]

    position = {"x": source["position"]["x"] + NODE_SPACING_X, "y": source["position"]["y"]}
    new_node = create_node(node_type, _next_id(nodes, "n"), position)
    nodes.append(new_node)

    if source["outputs"] and new_node["inputs"]:
        candidate["workflow"]["edges"].append(_new_edge(candidate, source, new_node))
    return candidate


def rename_node(doc: RawDoc, node_ref: str, new_name: str) -> RawDoc | None:
    candidate = copy.deepcopy(doc)
    target = _find_node(candidate, node_ref)
    if target is None:
        return None
    target["name"] = new_name
    return candidate


def delete_node(doc: RawDoc, node_ref: str) -> RawDoc | None:
    """Remove a node and its edges. The entry trigger cannot be deleted."""
    candidate = copy.deepcopy(doc)
    target = _find_node(candidate, node_ref)
    if target is None or target["id"] == candidate["workflow"]["entry_node_id"]:
        return None

    workflow = candidate["workflow"]
    workflow["nodes"] = [n for n in workflow["nodes"] if n["id"] != target["id"]]
    workflow["edges"] = [
        e for e in workflow["edges"]
        if e["source"]["node_id"] != target["id"] and e["target"]["node_id"] != target["id"]
    ]
    return candidate


def connect_nodes(doc: RawDoc, source_ref: str, target_ref: str) -> RawDoc | None:
    """Add an edge from the source's first output to the target's first input."""
    candidate = copy.deepcopy(doc)
    source = _find_node(candidate, source_ref)
    target = _find_node(candidate, target_ref)
    if source is None or target is None or not source["outputs"] or not target["inputs"]:
        return None
    candidate["workflow"]["edges"].append(_new_edge(candidate, source, target))
    return candidate


def apply_semantic_command(document: WorkflowDocument, command: str) -> EditResult:
    """Apply one free-text command to a document."""
    raw = command.strip()
    if not raw:
        return EditResult(ok=False, message="Type a command first.")

    doc = document.to_dict()
    candidate: RawDoc | None

    if match := _RENAME.match(raw):
        ref, name = match.group(1).strip(), match.group(2).strip()
        candidate = rename_node(doc, ref, name)
        message = f"Renamed {ref} to {name}." if candidate else "Node to rename not found."
    elif match := _DELETE.match(raw):
        ref = match.group(1).strip()
        candidate = delete_node(doc, ref)
        message = f"Deleted {ref}." if candidate else "Node could not be deleted (not found or is trigger)."
    elif match := _CONNECT.match(raw):
        source_ref, target_ref = match.group(1).strip(), match.group(2).strip()
        candidate = connect_nodes(doc, source_ref, target_ref)
        message = f"Connected {source_ref} to {target_ref}." if candidate else "Could not connect nodes."
    elif match := _ADD_DELAY.match(raw):
        seconds = int(match.group(1))
        candidate = add_node_at_end(doc, "logic.delay")
        candidate["workflow"]["nodes"][-1]["config"]["seconds"] = seconds
        message = f"Added delay node ({seconds}s) at end."
    elif raw.lower().startswith("add "):
        node_type = find_type_from_command(raw)
        if node_type is None:
            return EditResult(ok=False, message="I couldn't map that request to a supported node type yet.")
        candidate = add_node_at_end(doc, node_type)
        message = f"Added {node_type} at the end of the flow."
    else:
        return EditResult(ok=False, message=USAGE_MESSAGE)

    if candidate is None:
        return EditResult(ok=False, message=message)

    check = validate_workflow_document(candidate)
    if not check.ok:
        return EditResult(ok=False, message=REJECTED_MESSAGE, errors=check.errors)
    return EditResult(ok=True, message=message, document=check.document)
