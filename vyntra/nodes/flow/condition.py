"""Condition node - route the run down exactly one output branch."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...engine.expression_engine import expression_engine
from ..base import BaseNode, NodeTypeDescription, PortDefinition

if TYPE_CHECKING:
    from ...engine.effects import EffectBackend
    from ...engine.types import Context, NodeResult
    from ...schemas.node_config import ConditionConfig
    from ...schemas.workflow import Node


class ConditionNode(BaseNode):
    """
    Condition node.

    Takes the first output that is not ``default_output`` when the expression
    holds, otherwise ``default_output``. Writes nothing to the context.
    """

    node_description = NodeTypeDescription(
        name="logic.condition",
        display_name="Condition",
        description="Branch on a comparison expression (true/false outputs)",
        icon="git-branch",
        group="logic",
        outputs=[
            PortDefinition(id="true", label="True"),
            PortDefinition(id="false", label="False"),
        ],
        default_config={"expression": "$.score > 0.8", "default_output": "false"},
    )

    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        return self.output(context, {}, selected_output_port=self.select_port(node, context))

    @staticmethod
    def select_port(node: Node, context: Context) -> str | None:
        config: ConditionConfig = node.settings  # type: ignore[assignment]
        output_ids = node.output_ids
        default_output = config.default_output
        non_default = next(
            (port_id for port_id in output_ids if port_id != default_output),
            output_ids[0] if output_ids else None,
        )

        if expression_engine.evaluate(context, config.expression):
            return non_default
        return default_output if default_output is not None else non_default
