"""Extract Fields node - pull a fixed set of typed fields out of the input."""

from __future__ import annotations

import json
import logging
import math
from typing import Any, TYPE_CHECKING

from ...engine.expression_engine import to_number
from ..base import BaseNode, NodeTypeDescription, to_source_text

if TYPE_CHECKING:
    from ...engine.effects import EffectBackend
    from ...engine.types import Context, NodeResult
    from ...schemas.node_config import ExtractFieldsConfig, FieldSpec
    from ...schemas.workflow import Node

logger = logging.getLogger(__name__)


def default_value(field_type: str) -> Any:
    """Zero value for a declared field type."""
    if field_type == "number":
        return 0
    if field_type == "boolean":
        return False
    if field_type == "array":
        return []
    return ""


def default_fields(fields: list[FieldSpec]) -> dict[str, Any]:
    return {spec.key: default_value(spec.type) for spec in fields}


def _truthy(value: Any) -> bool:
    if isinstance(value, (list, dict)):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def coerce_field_value(value: Any, field_type: str) -> Any:
    """Coerce a model-returned value to its declared type."""
    if field_type == "number":
        if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
            return value
        number = to_number(value)
        if not math.isfinite(number):
            return 0
        return int(number) if number.is_integer() else number
    if field_type == "boolean":
        return _truthy(value)
    if field_type == "array":
        if isinstance(value, list):
            return value
        return [] if value is None else [value]
    if isinstance(value, str):
        return value
    return json.dumps("" if value is None else value, ensure_ascii=False, separators=(",", ":"))


class ExtractFieldsNode(BaseNode):
    """Extract Fields node - writes an object with exactly the configured keys."""

    node_description = NodeTypeDescription(
        name="ai.extract_fields",
        display_name="Extract Fields",
        description="Extract structured fields from the input",
        icon="list-checks",
        group="ai",
        default_config={
            "input_path": "$.input",
            "fields": [{"key": "field_1", "type": "string", "required": False}],
            "output_key": "extracted",
            "instructions": "Extract structured fields.",
        },
    )

    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        config: ExtractFieldsConfig = node.settings  # type: ignore[assignment]
        source = self.resolve(context, config.input_path)

        if not config.fields:
            return self.output(context, {config.output_key: {}})

        parsed = await effects.complete_json(self._build_prompt(source, config))
        fallback_used = effects.live and parsed is None
        if parsed is None:
            if fallback_used:
                logger.warning("Extraction response unusable for node %s, using defaults", node.id)
            extracted = default_fields(config.fields)
        else:
            extracted = {
                spec.key: coerce_field_value(parsed.get(spec.key), spec.type)
                for spec in config.fields
            }

        return self.output(context, {config.output_key: extracted}, fallback_used=fallback_used)

    def _build_prompt(self, source: Any, config: ExtractFieldsConfig) -> str:
        field_spec = [spec.model_dump() for spec in config.fields]
        return "\n\n".join([
            config.instructions,
            "Return JSON only as an object with the requested keys.",
            "Field spec:",
            json.dumps(field_spec),
            "Input:",
            to_source_text(source),
        ])
