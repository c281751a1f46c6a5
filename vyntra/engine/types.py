"""Core type definitions for the workflow engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Literal, TYPE_CHECKING

if TYPE_CHECKING:
    from ..schemas.workflow import WorkflowDocument

StepStatus = Literal["success", "failed"]
RunStatus = Literal["success", "failed"]
EffectMode = Literal["simulate", "live"]

# The accumulating record threaded through a run. Executors never mutate the
# mapping they receive; they return a new one.
Context = dict[str, Any]


@dataclass(frozen=True)
class NodeResult:
    """Result of executing one node.

    ``selected_output_port`` is set only by condition nodes. ``fallback_used``
    marks a live AI node that fell back to its deterministic stub.
    """

    context: Context
    selected_output_port: str | None = None
    fallback_used: bool = False


@dataclass(frozen=True)
class StepRecord:
    """Audit entry for one executed node."""

    node_id: str
    node_name: str
    node_type: str
    status: StepStatus
    started_at: datetime
    finished_at: datetime
    duration_ms: int
    selected_output_port: str | None
    next_node_ids: tuple[str, ...]
    input: Any
    output: Any
    error: str | None = None
    fallback_used: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "node_id": self.node_id,
            "node_name": self.node_name,
            "node_type": self.node_type,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "duration_ms": self.duration_ms,
            "selected_output_port": self.selected_output_port,
            "next_node_ids": list(self.next_node_ids),
            "input": self.input,
            "output": self.output,
            "fallback_used": self.fallback_used,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class RunResult:
    """Outcome of one run: status, step trace and terminal context."""

    run_id: str
    workflow_id: str
    mode: EffectMode
    status: RunStatus
    initial_input: Any
    output: Context
    steps: list[StepRecord] = field(default_factory=list)
    error: str | None = None
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None

    @property
    def failed_step(self) -> StepRecord | None:
        return next((s for s in self.steps if s.status == "failed"), None)


class ExecutionEventType(str, Enum):
    """Types of run lifecycle events."""

    EXECUTION_START = "execution:start"
    NODE_START = "node:start"
    NODE_COMPLETE = "node:complete"
    NODE_ERROR = "node:error"
    EXECUTION_COMPLETE = "execution:complete"
    EXECUTION_ERROR = "execution:error"


@dataclass
class ExecutionEvent:
    """Run lifecycle event delivered to an optional callback."""

    type: ExecutionEventType
    run_id: str
    timestamp: datetime
    node_id: str | None = None
    node_type: str | None = None
    error: str | None = None
    progress: dict[str, int] | None = None


# Callback type for receiving execution events
ExecutionEventCallback = Callable[[ExecutionEvent], None]


@dataclass
class StoredWorkflow:
    """A persisted workflow with its metadata."""

    id: str
    name: str
    description: str
    document: WorkflowDocument
    tags: list[str] = field(default_factory=list)
    prompt: str | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)


@dataclass
class RunRecord:
    """A persisted run."""

    id: str
    workflow_id: str
    status: RunStatus
    mode: EffectMode
    input_json: dict[str, Any]
    output_json: dict[str, Any] | None
    steps: list[dict[str, Any]]
    error: str | None
    created_at: datetime
    finished_at: datetime | None = None
