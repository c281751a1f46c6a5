"""Pydantic schemas for workflow documents and API request/response validation."""

from .workflow import (
    SCHEMA_VERSION,
    NODE_TYPES,
    TRIGGER_TYPES,
    Port,
    Node,
    Edge,
    Workflow,
    WorkflowDocument,
)
from .node_config import parse_node_config
from .workflow_api import (
    ValidateResponse,
    WorkflowListItem,
    WorkflowDetailResponse,
    EditRequest,
    EditResponse,
    GenerateRequest,
    GenerateResponse,
    NodeTypeResponse,
)
from .run import (
    RunWorkflowRequest,
    RunResponse,
    SimulateRequest,
    SimulateResponse,
    StepSchema,
    RunListItem,
    RunDetailResponse,
)
from .common import (
    SuccessResponse,
    HealthResponse,
    RootResponse,
)

__all__ = [
    "SCHEMA_VERSION",
    "NODE_TYPES",
    "TRIGGER_TYPES",
    "Port",
    "Node",
    "Edge",
    "Workflow",
    "WorkflowDocument",
    "parse_node_config",
    "ValidateResponse",
    "WorkflowListItem",
    "WorkflowDetailResponse",
    "EditRequest",
    "EditResponse",
    "GenerateRequest",
    "GenerateResponse",
    "NodeTypeResponse",
    "RunWorkflowRequest",
    "RunResponse",
    "SimulateRequest",
    "SimulateResponse",
    "StepSchema",
    "RunListItem",
    "RunDetailResponse",
    "SuccessResponse",
    "HealthResponse",
    "RootResponse",
]
