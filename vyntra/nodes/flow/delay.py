"""Delay node - record a delay marker. Runs are never suspended."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import BaseNode, NodeTypeDescription

if TYPE_CHECKING:
    from ...engine.effects import EffectBackend
    from ...engine.types import Context, NodeResult
    from ...schemas.node_config import DelayConfig
    from ...schemas.workflow import Node


class DelayNode(BaseNode):
    """Delay node - writes ``config.seconds`` to ``delay_applied``."""

    node_description = NodeTypeDescription(
        name="logic.delay",
        display_name="Delay",
        description="Mark a delay between steps",
        icon="hourglass",
        group="logic",
        default_config={"seconds": 30, "reason": "Rate limiting"},
    )

    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        config: DelayConfig = node.settings  # type: ignore[assignment]
        return self.output(context, {"delay_applied": config.seconds})
