"""Repository layer for data persistence."""

from .workflow_repository import WorkflowRepository
from .run_repository import RunRepository
from .record_repository import RecordRepository

__all__ = [
    "WorkflowRepository",
    "RunRepository",
    "RecordRepository",
]
