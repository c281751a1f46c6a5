"""Request and response schemas for the workflow endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ValidateResponse(BaseModel):
    ok: bool
    errors: list[str] = Field(default_factory=list)


class WorkflowListItem(BaseModel):
    """Schema for workflow in list response."""

    id: str
    name: str
    description: str
    tags: list[str]
    node_count: int
    created_at: str
    updated_at: str


class WorkflowDetailResponse(BaseModel):
    """Detailed workflow response."""

    id: str
    name: str
    description: str
    tags: list[str]
    prompt: str | None = None
    document: dict[str, Any]
    created_at: str
    updated_at: str


class EditRequest(BaseModel):
    command: str = Field(..., description="e.g. 'add delay 30 seconds', 'rename n2 to Score Lead'")


class EditResponse(BaseModel):
    ok: bool
    message: str
    document: dict[str, Any] | None = None
    errors: list[str] = Field(default_factory=list)


class GenerateRequest(BaseModel):
    """Natural-language description of the workflow to build."""

    prompt: str = Field(..., min_length=1)
    name: str | None = None
    description: str | None = None
    tags: list[str] | None = None


class GenerateResponse(BaseModel):
    ok: bool = True
    document: dict[str, Any]


class NodeTypeResponse(BaseModel):
    """Node type in the catalog."""

    type: str
    display_name: str
    description: str
    category: str
    icon: str | None = None
    inputs: list[dict[str, Any]]
    outputs: list[dict[str, Any]]
    default_config: dict[str, Any]
