"""Generate workflow documents from natural-language prompts."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from ..core.exceptions import GenerationError
from ..engine.validator import parse_document_text
from ..schemas.workflow import NODE_TYPES

if TYPE_CHECKING:
    from ..engine.effects import CompletionBackend
    from ..schemas.workflow import WorkflowDocument

logger = logging.getLogger(__name__)

# Repair hints sent back with the second attempt
MAX_REPAIR_ERRORS = 12

BASE_SYSTEM_PROMPT = """You generate workflow documents for Vyntra.
Return ONLY one valid JSON object. No markdown. No prose. No code fences.

STRICT REQUIRED TOP-LEVEL SHAPE:
{
  "schema_version": "1.0",
  "workflow": {
    "id": "wf_<short>",
    "name": "<string>",
    "description": "<string>",
    "tags": ["va"],
    "entry_node_id": "n1",
    "variables": {},
    "nodes": [ ... ],
    "edges": [ ... ]
  }
}

STRICT NODE SHAPE (for EVERY node):
{
  "id": "n1",
  "type": "<allowed-type>",
  "name": "Human name",
  "position": { "x": 80, "y": 120 },
  "inputs": [ { "id":"in","label":"In","schema":"JSON" } ] OR [] for trigger nodes only,
  "outputs": [ { "id":"out","label":"Out","schema":"JSON" } ],
  "config": { ... },
  "ui": { "icon":"...", "color":"neutral" }
}

STRICT EDGE SHAPE (for EVERY edge):
{
  "id": "e1",
  "source": { "node_id": "n1", "port_id": "out" },
  "target": { "node_id": "n2", "port_id": "in" },
  "label": null,
  "condition": null
}

DO NOT use shorthand:
- source/target must be objects, never strings
- inputs/outputs must be arrays of objects, never strings
- include all required fields on every node and edge

Allowed node types only:
{node_types}.

Rules:
- schema_version must be exactly "1.0"
- exactly one trigger node
- entry_node_id must equal trigger node id
- trigger nodes must have inputs: []
- non-trigger nodes must have >=1 input
- logic.condition must have >=2 outputs and config.default_output matching one output id
- all node ids and edge ids must be unique
- edge source must reference an OUTPUT port
- edge target must reference an INPUT port
- the graph must not contain cycles

Use practical config values for VA workflows."""


def build_system_prompt(
    name: str | None = None,
    description: str | None = None,
    tags: list[str] | None = None,
    retry_errors: list[str] | None = None,
) -> str:
    """System prompt with metadata hints and, on retry, the previous errors."""
    base = BASE_SYSTEM_PROMPT.replace("{node_types}", ", ".join(NODE_TYPES))
    hints = {
        "name": name or "Generated Workflow",
        "description": description or "Generated via Vyntra",
        "tags": tags or ["va"],
    }
    retry = ""
    if retry_errors:
        retry = "Previous attempt failed validation. Fix these errors:\n" + "\n".join(retry_errors)
    return f"{base}\nDefault metadata hints: {json.dumps(hints)}\n{retry}"


class GenerationService:
    """Turns a prompt into a validated document, with one repair attempt."""

    def __init__(self, completion: CompletionBackend) -> None:
        self._completion = completion

    async def generate(
        self,
        prompt: str,
        name: str | None = None,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> WorkflowDocument:
        """
        Generate a document that has passed validation.

        Raises:
            GenerationError: If the second attempt is still invalid
            CompletionError: If the completion service cannot be reached
        """
        system = build_system_prompt(name, description, tags)
        content = await self._completion.complete(prompt, system=system, json_mode=True)
        first = parse_document_text(content)
        if first.ok and first.document is not None:
            return first.document

        logger.info("Generated document invalid (%d errors), retrying once", len(first.errors))
        system = build_system_prompt(name, description, tags, first.errors[:MAX_REPAIR_ERRORS])
        content = await self._completion.complete(prompt, system=system, json_mode=True)
        second = parse_document_text(content)
        if second.ok and second.document is not None:
            return second.document

        raise GenerationError("Failed to generate valid workflow JSON", errors=second.errors)
