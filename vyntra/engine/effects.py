"""
Effect backends: the only way node executors reach the outside world.

One engine serves both run modes. ``SimulatedEffects`` answers every request
with ``None`` so executors use their deterministic stubs and nothing is
stored. ``LiveEffects`` forwards to a completion backend and a record store.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Protocol

from ..core.exceptions import NodeExecutionError

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

STRICT_JSON_SYSTEM_PROMPT = "Return strict JSON object only."


class EffectBackend(Protocol):
    """Capabilities available to node executors during a run."""

    live: bool

    async def complete(self, prompt: str, *, system: str | None = None) -> str | None:
        """Free-text completion, or None when no model is available."""
        ...

    async def complete_json(self, prompt: str, *, system: str | None = None) -> dict[str, Any] | None:
        """JSON-object completion, or None when none could be obtained."""
        ...

    async def insert(self, table: str, payload: dict[str, Any]) -> str | None:
        """Store a row, returning its id, or None when nothing is stored."""
        ...


class CompletionBackend(Protocol):
    async def complete(self, prompt: str, *, system: str | None = None, json_mode: bool = False) -> str:
        ...


class RecordStore(Protocol):
    async def insert(self, table: str, values: dict[str, Any]) -> str:
        ...


def _balanced_object(text: str) -> str | None:
    """Return the first brace-balanced ``{...}`` region, skipping string contents."""
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def extract_json_object(content: str) -> dict[str, Any] | None:
    """
    Pull a JSON object out of a model response.

    Candidates, in order: the whole text, the first fenced block, the first
    balanced ``{...}`` region, and the span from the first ``{`` to the last
    ``}``. Returns None when no candidate parses to an object.
    """
    trimmed = content.strip()
    candidates = [trimmed]

    fence = _FENCE.search(trimmed)
    if fence and fence.group(1):
        candidates.append(fence.group(1).strip())

    balanced = _balanced_object(trimmed)
    if balanced:
        candidates.append(balanced)

    first, last = trimmed.find("{"), trimmed.rfind("}")
    if first >= 0 and last > first:
        candidates.append(trimmed[first : last + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


class SimulatedEffects:
    """Side-effect free backend used for dry runs."""

    live = False

    async def complete(self, prompt: str, *, system: str | None = None) -> str | None:
        return None

    async def complete_json(self, prompt: str, *, system: str | None = None) -> dict[str, Any] | None:
        return None

    async def insert(self, table: str, payload: dict[str, Any]) -> str | None:
        return None


class LiveEffects:
    """Backend that calls the completion service and writes rows for one workflow."""

    live = True

    def __init__(
        self,
        completion: CompletionBackend,
        records: RecordStore,
        workflow_id: str,
    ) -> None:
        self._completion = completion
        self._records = records
        self.workflow_id = workflow_id

    async def complete(self, prompt: str, *, system: str | None = None) -> str | None:
        return await self._completion.complete(prompt, system=system)

    async def complete_json(self, prompt: str, *, system: str | None = None) -> dict[str, Any] | None:
        content = await self._completion.complete(
            prompt, system=system or STRICT_JSON_SYSTEM_PROMPT, json_mode=True,
        )
        parsed = extract_json_object(content)
        if parsed is None:
            logger.warning("Completion did not contain a JSON object; falling back to stub")
        return parsed

    async def insert(self, table: str, payload: dict[str, Any]) -> str | None:
        try:
            return await self._records.insert(table, {"workflow_id": self.workflow_id, **payload})
        except NodeExecutionError:
            raise
        except Exception as exc:
            raise NodeExecutionError(str(exc)) from exc
