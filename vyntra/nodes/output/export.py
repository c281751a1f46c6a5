"""Export node - serialize part of the context as JSON or CSV."""

from __future__ import annotations

import json
from typing import Any, TYPE_CHECKING

from ...core.exceptions import NodeExecutionError
from ..base import BaseNode, NodeTypeDescription

if TYPE_CHECKING:
    from ...engine.effects import EffectBackend
    from ...engine.types import Context, NodeResult
    from ...schemas.node_config import ExportConfig
    from ...schemas.workflow import Node

EXPORTS_TABLE = "workflow_exports"


def to_pretty_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _csv_cell(value: Any) -> str:
    if value is None:
        # Missing and null cells serialize as an empty JSON string
        raw = json.dumps("")
    elif isinstance(value, str):
        raw = value
    else:
        raw = json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return '"' + raw.replace('"', '""') + '"'


def to_csv(data: Any) -> str:
    """
    Serialize a list of objects as CSV.

    The first row's keys form the unquoted header; every cell is quoted with
    inner quotes doubled. Anything that is not a list of objects is returned as
    pretty-printed JSON instead.
    """
    if not isinstance(data, list) or (data and not isinstance(data[0], dict)):
        return to_pretty_json(data)
    if not data:
        return ""

    headers = list(data[0].keys())
    lines = [",".join(str(h) for h in headers)]
    for row in data:
        row = row if isinstance(row, dict) else {}
        lines.append(",".join(_csv_cell(row.get(h)) for h in headers))
    return "\n".join(lines)


class ExportNode(BaseNode):
    """Export node - writes an ``export`` record holding the serialized content."""

    node_description = NodeTypeDescription(
        name="output.export",
        display_name="Export",
        description="Export data as JSON or CSV",
        icon="download",
        group="output",
        default_config={"format": "json", "input_path": "$.input", "filename": "export.json"},
    )

    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        config: ExportConfig = node.settings  # type: ignore[assignment]
        data = self.resolve(context, config.input_path)
        content = to_csv(data) if config.format == "csv" else to_pretty_json(data)
        filename = config.resolved_filename

        record: dict[str, Any] = {"format": config.format, "filename": filename, "content": content}

        try:
            export_id = await effects.insert(
                EXPORTS_TABLE,
                {
                    "source_node_id": node.id,
                    "format": config.format,
                    "filename": filename,
                    "content_text": content,
                    "payload_json": data,
                },
            )
        except NodeExecutionError as exc:
            raise NodeExecutionError(f"export failed: {exc.message}", node_id=node.id) from exc

        if export_id is not None:
            record["export_id"] = export_id
        return self.output(context, {"export": record})
