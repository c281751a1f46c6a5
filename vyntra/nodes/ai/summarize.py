"""Summarize node - condense the input into a short text."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ..base import BaseNode, NodeTypeDescription, to_source_text

if TYPE_CHECKING:
    from ...engine.effects import EffectBackend
    from ...engine.types import Context, NodeResult
    from ...schemas.node_config import SummarizeConfig
    from ...schemas.workflow import Node

STUB_PREVIEW_CHARS = 180


class SummarizeNode(BaseNode):
    """Summarize node - writes a summary string to ``output_key``."""

    node_description = NodeTypeDescription(
        name="ai.summarize",
        display_name="Summarize",
        description="Summarize the input text or record",
        icon="file-text",
        group="ai",
        default_config={
            "input_path": "$.input",
            "style": "concise",
            "bullets": True,
            "output_key": "summary",
            "instructions": "Summarize the input.",
        },
    )

    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        config: SummarizeConfig = node.settings  # type: ignore[assignment]
        source = self.resolve(context, config.input_path)

        summary = await effects.complete(self._build_prompt(source, config))
        if summary is None:
            summary = self.stub_summary(source)

        return self.output(context, {config.output_key: summary})

    @staticmethod
    def stub_summary(source: Any) -> str:
        return f"Summary: {to_source_text(source)[:STUB_PREVIEW_CHARS]}"

    def _build_prompt(self, source: Any, config: SummarizeConfig) -> str:
        bullet_hint = "Use bullets." if config.bullets else "Return a short paragraph."
        return "\n\n".join([
            f"Task: {config.instructions}",
            f"Style: {config.style}. {bullet_hint}",
            "Input:",
            to_source_text(source),
        ])
