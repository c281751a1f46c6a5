"""Classify node - pick one label from a fixed list."""

from __future__ import annotations

import logging
import math
from typing import Any, TYPE_CHECKING

from ...engine.expression_engine import to_number
from ...engine.json_path import MISSING
from ..base import BaseNode, NodeTypeDescription, to_source_text

if TYPE_CHECKING:
    from ...engine.effects import EffectBackend
    from ...engine.types import Context, NodeResult
    from ...schemas.node_config import ClassifyConfig
    from ...schemas.workflow import Node

logger = logging.getLogger(__name__)

HIT_CONFIDENCE = 0.92
MISS_CONFIDENCE = 0.67
NO_LABEL = "general"


def classify_text(source: Any, labels: list[str]) -> tuple[str, float]:
    """
    Deterministic keyword classifier.

    A label scores 2 when its lowercase form occurs in the lowercased input,
    otherwise 1. Highest score wins, ties go to the lexicographically first label.
    """
    text = to_source_text(source).lower()
    scored = sorted(
        ((2 if label.lower() in text else 1, label) for label in labels),
        key=lambda item: (-item[0], item[1]),
    )
    if not scored:
        return NO_LABEL, MISS_CONFIDENCE
    score, label = scored[0]
    return label, HIT_CONFIDENCE if score == 2 else MISS_CONFIDENCE


class ClassifyNode(BaseNode):
    """Classify node - writes a label and a confidence in [0, 1]."""

    node_description = NodeTypeDescription(
        name="ai.classify",
        display_name="Classify",
        description="Classify the input into one of the configured labels",
        icon="tags",
        group="ai",
        default_config={
            "input_path": "$.input",
            "labels": ["high", "medium", "low"],
            "output_key": "label",
            "confidence_key": "confidence",
            "instructions": "Classify the input.",
        },
    )

    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        config: ClassifyConfig = node.settings  # type: ignore[assignment]
        source = self.resolve(context, config.input_path)
        labels = config.labels

        answer = None
        if labels:
            parsed = await effects.complete_json(self._build_prompt(source, labels, config))
            answer = self._accept(parsed, labels)

        fallback_used = effects.live and bool(labels) and answer is None
        if fallback_used:
            logger.warning("Classifier response unusable for node %s, using keyword classifier", node.id)
        label, confidence = answer or classify_text(source, labels)

        return self.output(
            context,
            {config.output_key: label, config.confidence_key: confidence},
            fallback_used=fallback_used,
        )

    @staticmethod
    def _accept(parsed: dict[str, Any] | None, labels: list[str]) -> tuple[str, float] | None:
        """Keep a model answer only if its label is allowed and confidence is finite."""
        if parsed is None:
            return None
        raw_label = parsed.get("label")
        label = raw_label.strip() if isinstance(raw_label, str) else ""
        if label not in labels:
            return None
        confidence = to_number(parsed.get("confidence", MISSING))
        if not math.isfinite(confidence):
            return None
        return label, max(0.0, min(1.0, confidence))

    def _build_prompt(self, source: Any, labels: list[str], config: ClassifyConfig) -> str:
        labels_list = "\n".join(f"- {label}" for label in labels)
        return "\n\n".join([
            config.instructions,
            "Return JSON only in this shape:",
            '{"label":"<one label from provided list>","confidence":0.0}',
            "Allowed labels:",
            labels_list,
            "Input:",
            to_source_text(source),
        ])
