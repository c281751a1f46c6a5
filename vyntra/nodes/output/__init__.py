"""Output nodes."""

from .db_save import DbSaveNode
from .export import ExportNode

__all__ = [
    "DbSaveNode",
    "ExportNode",
]
