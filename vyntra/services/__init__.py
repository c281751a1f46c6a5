"""Service layer for business logic."""

from .workflow_service import WorkflowService
from .run_service import RunService
from .generation_service import GenerationService
from .semantic_edit import EditResult, apply_semantic_command

__all__ = [
    "WorkflowService",
    "RunService",
    "GenerationService",
    "EditResult",
    "apply_semantic_command",
]
