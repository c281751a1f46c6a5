"""Flow control nodes."""

from .condition import ConditionNode
from .delay import DelayNode

__all__ = [
    "ConditionNode",
    "DelayNode",
]
