"""
Workflow runner - executes DAG-based workflows.

Nodes run one at a time in topological order. A node executes only once a
taken branch has activated it; the first failing node ends the run.
"""

from __future__ import annotations

import copy
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, TYPE_CHECKING

from ..core.exceptions import WorkflowEngineError
from ..schemas.workflow import WorkflowDocument
from .effects import SimulatedEffects
from .scheduler import GraphScheduler
from .types import (
    ExecutionEvent,
    ExecutionEventCallback,
    ExecutionEventType,
    NodeResult,
    RunResult,
    StepRecord,
)
from .validator import require_valid_document

if TYPE_CHECKING:
    from ..schemas.workflow import Node
    from .effects import EffectBackend
    from .node_registry import NodeRegistryClass
    from .types import Context

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _error_message(exc: Exception) -> str:
    if isinstance(exc, WorkflowEngineError):
        return exc.message
    return str(exc) or exc.__class__.__name__


class WorkflowRunner:
    """Executes one workflow document against an effect backend."""

    def __init__(
        self,
        effects: EffectBackend | None = None,
        registry: NodeRegistryClass | None = None,
    ) -> None:
        from .node_registry import node_registry, register_all_nodes

        if registry is None:
            registry = node_registry
            if not registry.list():
                register_all_nodes()
        self._registry: NodeRegistryClass = registry
        self._effects: EffectBackend = effects or SimulatedEffects()

    @property
    def mode(self) -> str:
        return "live" if self._effects.live else "simulate"

    async def run(
        self,
        document: WorkflowDocument | dict[str, Any],
        input_json: Any = None,
        on_event: ExecutionEventCallback | None = None,
        run_id: str | None = None,
    ) -> RunResult:
        """
        Run a workflow document.

        Args:
            document: A validated document, or raw data to validate first
            input_json: Initial payload; when None the trigger's sample payload is used
            on_event: Optional callback for run lifecycle events
            run_id: Id to report; generated when omitted

        Raises:
            WorkflowValidationError: If raw data fails validation
            SchedulingError: If the graph cannot be ordered; no node runs
        """
        if not isinstance(document, WorkflowDocument):
            document = require_valid_document(document)
        workflow = document.workflow
        run_id = run_id or self._generate_id()

        scheduler = GraphScheduler(workflow)

        initial_input = self._initial_input(document, input_json)
        context: Context = {"input": copy.deepcopy(initial_input)}
        result = RunResult(
            run_id=run_id,
            workflow_id=workflow.id,
            mode=self.mode,  # type: ignore[arg-type]
            status="success",
            initial_input=initial_input,
            output=context,
            started_at=_now(),
        )

        total_nodes = len(workflow.nodes)
        logger.info("Run %s started for workflow %s (%s)", run_id, workflow.id, self.mode)
        self._emit_event(
            on_event,
            ExecutionEvent(
                type=ExecutionEventType.EXECUTION_START,
                run_id=run_id,
                timestamp=_now(),
                progress={"completed": 0, "total": total_nodes},
            ),
        )

        for node in scheduler.order:
            if not scheduler.is_active(node.id):
                continue

            self._emit_event(
                on_event,
                ExecutionEvent(
                    type=ExecutionEventType.NODE_START,
                    run_id=run_id,
                    timestamp=_now(),
                    node_id=node.id,
                    node_type=node.type,
                    progress={"completed": len(result.steps), "total": total_nodes},
                ),
            )

            started_at = _now()
            start = time.perf_counter()
            try:
                node_result = await self._execute_node(node, context)
            except Exception as exc:
                message = _error_message(exc)
                logger.warning("Node %s (%s) failed in run %s: %s", node.id, node.type, run_id, message)
                result.steps.append(
                    self._step(node, "failed", started_at, start, context, {"error": message}, error=message)
                )
                result.status = "failed"
                result.error = message
                self._emit_event(
                    on_event,
                    ExecutionEvent(
                        type=ExecutionEventType.NODE_ERROR,
                        run_id=run_id,
                        timestamp=_now(),
                        node_id=node.id,
                        node_type=node.type,
                        error=message,
                    ),
                )
                break

            next_ids = scheduler.follow(node, node_result.selected_output_port)
            result.steps.append(
                self._step(
                    node,
                    "success",
                    started_at,
                    start,
                    context,
                    node_result.context,
                    selected_output_port=node_result.selected_output_port,
                    next_node_ids=next_ids,
                    fallback_used=node_result.fallback_used,
                )
            )
            context = node_result.context
            result.output = context

            self._emit_event(
                on_event,
                ExecutionEvent(
                    type=ExecutionEventType.NODE_COMPLETE,
                    run_id=run_id,
                    timestamp=_now(),
                    node_id=node.id,
                    node_type=node.type,
                    progress={"completed": len(result.steps), "total": total_nodes},
                ),
            )

        result.finished_at = _now()
        if result.status == "failed":
            logger.info("Run %s failed after %d steps", run_id, len(result.steps))
            self._emit_event(
                on_event,
                ExecutionEvent(
                    type=ExecutionEventType.EXECUTION_ERROR,
                    run_id=run_id,
                    timestamp=_now(),
                    error=result.error,
                ),
            )
        else:
            logger.info("Run %s succeeded with %d steps", run_id, len(result.steps))
            self._emit_event(
                on_event,
                ExecutionEvent(
                    type=ExecutionEventType.EXECUTION_COMPLETE,
                    run_id=run_id,
                    timestamp=_now(),
                    progress={"completed": len(result.steps), "total": total_nodes},
                ),
            )
        return result

    async def _execute_node(self, node: Node, context: Context) -> NodeResult:
        executor = self._registry.get(node.type)
        return await executor.execute(node, context, self._effects)

    def _initial_input(self, document: WorkflowDocument, input_json: Any) -> Any:
        """Caller override first, then the trigger's sample/sample_payload/payload."""
        if input_json is not None:
            return copy.deepcopy(input_json)
        trigger = document.workflow.entry_node
        if trigger is None:
            return {}
        return copy.deepcopy(trigger.settings.initial_payload())  # type: ignore[union-attr]

    def _step(
        self,
        node: Node,
        status: str,
        started_at: datetime,
        start: float,
        before: Context,
        after: Any,
        *,
        error: str | None = None,
        selected_output_port: str | None = None,
        next_node_ids: list[str] | None = None,
        fallback_used: bool = False,
    ) -> StepRecord:
        return StepRecord(
            node_id=node.id,
            node_name=node.name,
            node_type=node.type,
            status=status,  # type: ignore[arg-type]
            started_at=started_at,
            finished_at=_now(),
            duration_ms=int((time.perf_counter() - start) * 1000),
            selected_output_port=selected_output_port,
            next_node_ids=tuple(next_node_ids or ()),
            input=copy.deepcopy(before),
            output=copy.deepcopy(after),
            error=error,
            fallback_used=fallback_used,
        )

    def _emit_event(
        self, on_event: ExecutionEventCallback | None, event: ExecutionEvent
    ) -> None:
        """Helper to emit events safely."""
        if on_event:
            try:
                on_event(event)
            except Exception:
                logger.exception("Error in execution event callback")

    def _generate_id(self) -> str:
        """Generate unique run ID."""
        return uuid.uuid4().hex
