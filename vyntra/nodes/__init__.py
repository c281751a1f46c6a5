"""Built-in workflow nodes."""

from .base import BaseNode, NodeTypeDescription, PortDefinition
from .triggers import (
    ManualTriggerNode,
    WebhookTriggerNode,
    ScheduleTriggerNode,
    FileUploadTriggerNode,
)
from .ai import (
    SummarizeNode,
    ClassifyNode,
    ExtractFieldsNode,
    GenerateReportNode,
)
from .flow import ConditionNode, DelayNode
from .output import DbSaveNode, ExportNode

__all__ = [
    "BaseNode",
    "NodeTypeDescription",
    "PortDefinition",
    # Triggers
    "ManualTriggerNode",
    "WebhookTriggerNode",
    "ScheduleTriggerNode",
    "FileUploadTriggerNode",
    # AI
    "SummarizeNode",
    "ClassifyNode",
    "ExtractFieldsNode",
    "GenerateReportNode",
    # Logic
    "ConditionNode",
    "DelayNode",
    # Output
    "DbSaveNode",
    "ExportNode",
]
