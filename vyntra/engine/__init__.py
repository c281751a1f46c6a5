"""Core workflow engine components."""

from .types import (
    NodeResult,
    StepRecord,
    RunResult,
    ExecutionEvent,
    ExecutionEventType,
)
from .json_path import MISSING, resolve_json_path
from .expression_engine import ExpressionEngine, expression_engine
from .effects import EffectBackend, LiveEffects, SimulatedEffects
from .scheduler import GraphScheduler, topological_order
from .validator import ValidationResult, validate_workflow_document
from .node_registry import NodeRegistryClass, node_registry, register_all_nodes
from .workflow_runner import WorkflowRunner

__all__ = [
    "NodeResult",
    "StepRecord",
    "RunResult",
    "ExecutionEvent",
    "ExecutionEventType",
    "MISSING",
    "resolve_json_path",
    "ExpressionEngine",
    "expression_engine",
    "EffectBackend",
    "LiveEffects",
    "SimulatedEffects",
    "GraphScheduler",
    "topological_order",
    "ValidationResult",
    "validate_workflow_document",
    "NodeRegistryClass",
    "node_registry",
    "register_all_nodes",
    "WorkflowRunner",
]
