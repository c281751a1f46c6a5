"""Core configuration, exceptions and dependency injection."""

from .config import Settings, get_settings, settings
from .exceptions import (
    WorkflowEngineError,
    WorkflowNotFoundError,
    RunNotFoundError,
    NodeNotFoundError,
    WorkflowValidationError,
    SchedulingError,
    NodeExecutionError,
    CompletionError,
    RunLimitExceededError,
    GenerationError,
    EditRejectedError,
)

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "WorkflowEngineError",
    "WorkflowNotFoundError",
    "RunNotFoundError",
    "NodeNotFoundError",
    "WorkflowValidationError",
    "SchedulingError",
    "NodeExecutionError",
    "CompletionError",
    "RunLimitExceededError",
    "GenerationError",
    "EditRejectedError",
]
