"""Node registry for managing workflow node types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING

from ..core.exceptions import NodeNotFoundError

if TYPE_CHECKING:
    from ..nodes.base import BaseNode


@dataclass
class NodeTypeInfo:
    """Node type information for API responses."""

    type: str
    display_name: str
    description: str
    category: str
    icon: str | None = None
    inputs: list[dict[str, Any]] = field(default_factory=list)
    outputs: list[dict[str, Any]] = field(default_factory=list)
    default_config: dict[str, Any] = field(default_factory=dict)


class NodeRegistryClass:
    """Registry for workflow node types."""

    def __init__(self) -> None:
        self._nodes: dict[str, type[BaseNode]] = {}
        self._instances: dict[str, BaseNode] = {}

    def get(self, node_type: str) -> BaseNode:
        """
        Get a cached node instance by type.

        Node instances are stateless, so one instance serves every run.

        Raises:
            NodeNotFoundError: If node type is not registered
        """
        if node_type not in self._instances:
            raise NodeNotFoundError(node_type)
        return self._instances[node_type]

    def has(self, node_type: str) -> bool:
        """Check if node type is registered."""
        return node_type in self._nodes

    def list(self) -> list[str]:
        """List all registered node types."""
        return list(self._nodes.keys())

    def get_node_info_full(self) -> list[NodeTypeInfo]:
        """Catalog of every registered node type, in registration order."""
        return [self._build_node_type_info(instance) for instance in self._instances.values()]

    def get_node_type_info(self, node_type: str) -> NodeTypeInfo | None:
        """Get full info for a specific node type."""
        instance = self._instances.get(node_type)
        if not instance:
            return None
        return self._build_node_type_info(instance)

    def _build_node_type_info(self, instance: BaseNode) -> NodeTypeInfo:
        desc = instance.node_description
        return NodeTypeInfo(
            type=instance.type,
            display_name=desc.display_name,
            description=instance.description,
            category=desc.group,
            icon=desc.icon,
            inputs=[port.to_dict() for port in desc.inputs],
            outputs=[port.to_dict() for port in desc.outputs],
            default_config=dict(desc.default_config),
        )

    def register(self, node_class: type[BaseNode]) -> None:
        """Register a node class if not already registered."""
        instance = node_class()
        if instance.type not in self._nodes:
            self._nodes[instance.type] = node_class
            self._instances[instance.type] = instance


# Singleton instance
node_registry = NodeRegistryClass()


def register_all_nodes() -> None:
    """Register all built-in nodes."""
    from ..nodes import (
        # Triggers
        ManualTriggerNode,
        WebhookTriggerNode,
        ScheduleTriggerNode,
        FileUploadTriggerNode,
        # AI
        SummarizeNode,
        ClassifyNode,
        ExtractFieldsNode,
        GenerateReportNode,
        # Logic
        ConditionNode,
        DelayNode,
        # Output
        DbSaveNode,
        ExportNode,
    )

    all_node_classes: list[type[BaseNode]] = [
        ManualTriggerNode,
        WebhookTriggerNode,
        ScheduleTriggerNode,
        FileUploadTriggerNode,
        SummarizeNode,
        ClassifyNode,
        ExtractFieldsNode,
        GenerateReportNode,
        ConditionNode,
        DelayNode,
        DbSaveNode,
        ExportNode,
    ]

    for node_class in all_node_classes:
        node_registry.register(node_class)
