"""DB Save node - persist a record built from the context."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from ...core.config import settings
from ...core.exceptions import NodeExecutionError
from ...engine.json_path import MISSING, resolve_json_path
from ..base import BaseNode, NodeTypeDescription

if TYPE_CHECKING:
    from ...engine.effects import EffectBackend
    from ...engine.types import Context, NodeResult
    from ...schemas.node_config import DbSaveConfig
    from ...schemas.workflow import Node


def build_payload(context: Context, mapping: dict[str, Any]) -> dict[str, Any]:
    """
    Resolve a mapping into a record.

    String values starting with ``$`` are paths into the context; other values
    are literals. Keys whose path resolves to nothing are left out.
    """
    payload: dict[str, Any] = {}
    for key, value in mapping.items():
        if isinstance(value, str) and value.startswith("$"):
            resolved = resolve_json_path(context, value, default=MISSING)
            if resolved is MISSING:
                continue
            payload[key] = resolved
        else:
            payload[key] = value
    return payload


class DbSaveNode(BaseNode):
    """DB Save node - writes a ``db_save`` summary; live runs insert a row."""

    node_description = NodeTypeDescription(
        name="output.db_save",
        display_name="Save to DB",
        description="Save a record built from the run context",
        icon="database",
        group="output",
        default_config={"table": "va_items", "mode": "insert", "mapping": {"payload": "$.input"}},
    )

    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        config: DbSaveConfig = node.settings  # type: ignore[assignment]
        if effects.live and config.table != settings.db_save_table:
            raise NodeExecutionError(f"db_save unsupported table: {config.table}", node_id=node.id)

        payload = build_payload(context, config.mapping)
        record: dict[str, Any] = {
            "would_save": True,
            "table": config.table,
            "mode": config.mode,
            "payload": payload,
        }

        try:
            inserted_id = await effects.insert(
                config.table, {"source_node_id": node.id, "data_json": payload},
            )
        except NodeExecutionError as exc:
            raise NodeExecutionError(f"db_save failed: {exc.message}", node_id=node.id) from exc

        if inserted_id is not None:
            record["inserted_id"] = inserted_id
        return self.output(context, {"db_save": record})
