"""AI nodes."""

from .summarize import SummarizeNode
from .classify import ClassifyNode
from .extract_fields import ExtractFieldsNode
from .generate_report import GenerateReportNode

__all__ = [
    "SummarizeNode",
    "ClassifyNode",
    "ExtractFieldsNode",
    "GenerateReportNode",
]
