"""Custom exceptions for the workflow engine."""

from typing import Any


class WorkflowEngineError(Exception):
    """Base exception for all workflow engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class WorkflowNotFoundError(WorkflowEngineError):
    """Raised when a workflow is not found."""

    def __init__(self, workflow_id: str) -> None:
        super().__init__(
            message=f"Workflow not found: {workflow_id}",
            details={"workflow_id": workflow_id},
        )
        self.workflow_id = workflow_id


class RunNotFoundError(WorkflowEngineError):
    """Raised when a run record is not found."""

    def __init__(self, run_id: str) -> None:
        super().__init__(
            message=f"Run not found: {run_id}",
            details={"run_id": run_id},
        )
        self.run_id = run_id


class NodeNotFoundError(WorkflowEngineError):
    """Raised when a node type is not registered."""

    def __init__(self, node_type: str) -> None:
        super().__init__(
            message=f"Node type not found: {node_type}",
            details={"node_type": node_type},
        )
        self.node_type = node_type


class WorkflowValidationError(WorkflowEngineError):
    """Raised when a workflow document fails validation.

    ``errors`` holds every violation as ``<dotted path>: <message>``.
    """

    def __init__(self, errors: list[str], message: str = "Workflow document failed validation") -> None:
        super().__init__(message=message, details={"errors": errors})
        self.errors = errors


class SchedulingError(WorkflowEngineError):
    """Raised when the workflow graph cannot be topologically ordered."""

    def __init__(self, message: str = "Workflow graph is not a DAG", workflow_id: str | None = None) -> None:
        super().__init__(message=message, details={"workflow_id": workflow_id})
        self.workflow_id = workflow_id


class NodeExecutionError(WorkflowEngineError):
    """Raised by a node executor for a failure that must abort the run."""

    def __init__(self, message: str, node_id: str | None = None) -> None:
        super().__init__(message=message, details={"node_id": node_id})
        self.node_id = node_id


class CompletionError(WorkflowEngineError):
    """Raised when the completion backend cannot produce a response."""

    def __init__(self, message: str, model: str | None = None) -> None:
        super().__init__(message=message, details={"model": model})
        self.model = model


class RunLimitExceededError(WorkflowEngineError):
    """Raised when a workflow has used up its monthly run allowance."""

    def __init__(self, limit: int, period_start: str) -> None:
        super().__init__(
            message="Monthly run limit reached",
            details={"limit": limit, "period_start": period_start},
        )
        self.limit = limit
        self.period_start = period_start


class GenerationError(WorkflowEngineError):
    """Raised when a generated document is still invalid after the repair attempt."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message=message, details={"errors": errors or []})
        self.errors = errors or []


class EditRejectedError(WorkflowEngineError):
    """Raised when a semantic edit cannot be applied."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message=message, details={"errors": errors or []})
        self.errors = errors or []
