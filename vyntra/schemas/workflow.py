"""Workflow document Pydantic schemas.

A validated document is immutable. Edits work on a dumped copy which is then
validated again from scratch.
"""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, StrictFloat, StrictInt, StrictStr

from .node_config import AnyNodeConfig, parse_node_config

SCHEMA_VERSION = "1.0"

NodeType = Literal[
    "trigger.manual",
    "trigger.webhook",
    "trigger.schedule",
    "trigger.file_upload",
    "ai.summarize",
    "ai.classify",
    "ai.extract_fields",
    "ai.generate_report",
    "logic.condition",
    "logic.delay",
    "output.db_save",
    "output.export",
]

NODE_TYPES: tuple[str, ...] = get_args(NodeType)
TRIGGER_TYPES: frozenset[str] = frozenset(t for t in NODE_TYPES if t.startswith("trigger."))

WORKFLOW_ID_PATTERN = r"^wf_[A-Za-z0-9_-]+$"


def is_trigger_type(node_type: str) -> bool:
    return node_type in TRIGGER_TYPES


class DocumentModel(BaseModel):
    """Shared config for every document model."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Port(DocumentModel):
    """Input or output port of a node."""

    id: StrictStr = Field(..., min_length=1)
    label: StrictStr = Field(..., min_length=1)
    schema_: StrictStr = Field(..., min_length=1, alias="schema", description="Descriptive data tag, not enforced")


class Position(DocumentModel):
    x: StrictInt | StrictFloat
    y: StrictInt | StrictFloat


class NodeUI(DocumentModel):
    icon: StrictStr = Field(..., min_length=1)
    color: StrictStr = Field(..., min_length=1)


class Node(DocumentModel):
    """A node in the workflow graph."""

    id: StrictStr = Field(..., min_length=1)
    type: NodeType
    name: StrictStr = Field(..., min_length=1)
    position: Position
    inputs: list[Port]
    outputs: list[Port] = Field(..., min_length=1)
    config: dict[str, Any]
    ui: NodeUI

    _typed_config: AnyNodeConfig = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._typed_config = parse_node_config(self.type, self.config)

    @property
    def settings(self) -> AnyNodeConfig:
        """Typed view of ``config`` for this node's type."""
        return self._typed_config

    @property
    def is_trigger(self) -> bool:
        return is_trigger_type(self.type)

    @property
    def output_ids(self) -> list[str]:
        return [port.id for port in self.outputs]

    @property
    def input_ids(self) -> list[str]:
        return [port.id for port in self.inputs]


class EdgeEndpoint(DocumentModel):
    node_id: StrictStr = Field(..., min_length=1)
    port_id: StrictStr = Field(..., min_length=1)


class Edge(DocumentModel):
    """Connection from a node output port to a node input port.

    ``condition`` is descriptive only. Branching is decided by condition nodes.
    """

    id: StrictStr = Field(..., min_length=1)
    source: EdgeEndpoint
    target: EdgeEndpoint
    label: StrictStr | None = None
    condition: StrictStr | None = None


class Workflow(DocumentModel):
    """The workflow graph and its metadata."""

    id: StrictStr = Field(..., pattern=WORKFLOW_ID_PATTERN)
    name: StrictStr = Field(..., min_length=1)
    description: StrictStr = Field(..., min_length=1)
    tags: list[StrictStr] = Field(default_factory=list)
    entry_node_id: StrictStr = Field(..., min_length=1)
    variables: dict[str, Any] = Field(default_factory=dict)
    nodes: list[Node] = Field(..., min_length=1)
    edges: list[Edge]

    def get_node(self, node_id: str) -> Node | None:
        return next((n for n in self.nodes if n.id == node_id), None)

    @property
    def entry_node(self) -> Node | None:
        return self.get_node(self.entry_node_id)


class WorkflowDocument(DocumentModel):
    """Top-level versioned container."""

    schema_version: Literal["1.0"]
    workflow: Workflow

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dict, using wire field names."""
        return self.model_dump(mode="json", by_alias=True)
