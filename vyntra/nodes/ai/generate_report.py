"""Generate Report node - produce a report document from the input."""

from __future__ import annotations

import json
from typing import Any, TYPE_CHECKING

from ..base import BaseNode, NodeTypeDescription, to_source_text

if TYPE_CHECKING:
    from ...engine.effects import EffectBackend
    from ...engine.types import Context, NodeResult
    from ...schemas.node_config import GenerateReportConfig
    from ...schemas.workflow import Node

STUB_PREVIEW_CHARS = 120


class GenerateReportNode(BaseNode):
    """Generate Report node - writes report text to ``output_key``."""

    node_description = NodeTypeDescription(
        name="ai.generate_report",
        display_name="Generate Report",
        description="Generate a report, checklist or SOP from the input",
        icon="file-bar-chart",
        group="ai",
        default_config={
            "template": "Checklist",
            "input_path": "$.input",
            "format": "markdown",
            "output_key": "report",
            "instructions": "Generate a concise checklist.",
        },
    )

    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        config: GenerateReportConfig = node.settings  # type: ignore[assignment]
        source = self.resolve(context, config.input_path)

        report = await effects.complete(self._build_prompt(source, config))
        if report is None:
            report = self.stub_report(source)

        return self.output(context, {config.output_key: report})

    @staticmethod
    def stub_report(source: Any) -> str:
        preview = json.dumps(source, ensure_ascii=False, separators=(",", ":"), default=str)
        return f"# Generated Report\n\n- Source: {preview[:STUB_PREVIEW_CHARS]}\n- Step 1\n- Step 2"

    def _build_prompt(self, source: Any, config: GenerateReportConfig) -> str:
        return "\n\n".join([
            f"Task: {config.instructions}",
            f"Template: {config.template}",
            f"Output format: {config.format}",
            "Return only the report content.",
            "Input:",
            to_source_text(source),
        ])
