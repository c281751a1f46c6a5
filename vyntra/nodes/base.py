"""Base node class for all workflow nodes."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from ..engine.json_path import resolve_json_path
from ..engine.types import NodeResult

if TYPE_CHECKING:
    from ..engine.effects import EffectBackend
    from ..engine.types import Context
    from ..schemas.workflow import Node


@dataclass
class PortDefinition:
    """Default port created for a new node of this type."""

    id: str
    label: str
    schema: str = "JSON"

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "label": self.label, "schema": self.schema}


@dataclass
class NodeTypeDescription:
    """Description of a node type for the catalog and for new-node templates."""

    name: str
    display_name: str
    description: str
    icon: str = "sparkles"
    group: str = "ai"
    inputs: list[PortDefinition] = field(
        default_factory=lambda: [PortDefinition(id="in", label="In")]
    )
    outputs: list[PortDefinition] = field(
        default_factory=lambda: [PortDefinition(id="out", label="Out")]
    )
    default_config: dict[str, Any] = field(default_factory=dict)


def to_source_text(value: Any) -> str:
    """Text form of a resolved value: strings as-is, anything else as compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


class BaseNode(ABC):
    """
    Abstract base class for all workflow nodes.

    Each subclass defines a class-level ``node_description``. Executors are
    stateless; one cached instance serves every run.
    """

    node_description: NodeTypeDescription

    @property
    def type(self) -> str:
        """Node type identifier, e.g. ``ai.summarize``."""
        return self.node_description.name

    @property
    def description(self) -> str:
        return self.node_description.description

    @abstractmethod
    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        """Execute the node and return the updated context."""
        ...

    def resolve(self, context: Context, path: str | None) -> Any:
        return resolve_json_path(context, path)

    def output(self, context: Context, values: dict[str, Any], **kwargs: Any) -> NodeResult:
        """Helper to build a result whose context is ``context`` plus ``values``."""
        return NodeResult(context={**context, **values}, **kwargs)
