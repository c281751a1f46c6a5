"""Run-related Pydantic schemas."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class RunWorkflowRequest(BaseModel):
    """Request body for running a stored workflow."""

    input_json: Any = Field(default=None, description="Overrides the trigger's sample payload")
    mode: Literal["simulate", "live"] | None = Field(
        default=None, description="Effect mode; defaults to the configured run mode"
    )


class RunResponse(BaseModel):
    """Result of the run invocation surface.

    Successful runs carry ``output_json`` and ``steps_count``; failed runs carry
    ``error`` and ``details`` and still have a ``run_id``.
    """

    ok: bool
    run_id: str | None = None
    output_json: dict[str, Any] | None = None
    steps_count: int | None = None
    error: str | None = None
    details: str | None = None


class SimulateRequest(BaseModel):
    """Request body for a dry run of an unsaved document."""

    document: dict[str, Any]
    input_json: Any = None


class StepSchema(BaseModel):
    """One executed node."""

    node_id: str
    node_name: str
    node_type: str
    status: str
    started_at: str
    finished_at: str
    duration_ms: int
    selected_output_port: str | None
    next_node_ids: list[str]
    input: Any
    output: Any
    error: str | None = None
    fallback_used: bool = False


class SimulateResponse(BaseModel):
    """Full trace of a dry run."""

    run_id: str
    status: str
    mode: str
    output_json: dict[str, Any]
    steps: list[StepSchema]
    error: str | None = None


class RunListItem(BaseModel):
    """Schema for a run in list response."""

    id: str
    workflow_id: str
    status: str
    mode: str
    created_at: str
    steps_count: int
    error: str | None = None


class RunDetailResponse(BaseModel):
    """Detailed run response."""

    id: str
    workflow_id: str
    status: str
    mode: str
    input_json: dict[str, Any]
    output_json: dict[str, Any] | None
    steps: list[StepSchema]
    error: str | None = None
    created_at: str
    finished_at: str | None = None
