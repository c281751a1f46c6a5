"""Database configuration and models."""

from .session import engine, async_session_factory, init_db, get_session
from .models import WorkflowModel, RunModel, ItemModel, ExportModel

__all__ = [
    "engine",
    "async_session_factory",
    "init_db",
    "get_session",
    "WorkflowModel",
    "RunModel",
    "ItemModel",
    "ExportModel",
]
