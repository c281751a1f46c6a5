"""SQLModel database models."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlmodel import Column, Field, SQLModel
from sqlalchemy import JSON


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite stores datetimes without a zone."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class WorkflowModel(SQLModel, table=True):
    """Workflow database model."""

    __tablename__ = "workflows"

    id: str = Field(primary_key=True)
    name: str = Field(index=True)
    description: str = Field(default="")
    prompt: str | None = Field(default=None)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    # The full validated workflow document
    definition: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class RunModel(SQLModel, table=True):
    """Run history database model."""

    __tablename__ = "runs"

    id: str = Field(primary_key=True)
    workflow_id: str = Field(index=True)

    status: str = Field(index=True)  # success, failed
    mode: str  # simulate, live

    # {"source": "run-<mode>", "payload": ...}
    input_json: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    output_json: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    steps: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    error: str | None = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, index=True)
    finished_at: datetime | None = Field(default=None)


class ItemModel(SQLModel, table=True):
    """Rows written by live db_save nodes."""

    __tablename__ = "va_items"

    id: str = Field(primary_key=True)
    workflow_id: str = Field(index=True)
    source_node_id: str
    data_json: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow)


class ExportModel(SQLModel, table=True):
    """Content written by live export nodes."""

    __tablename__ = "workflow_exports"

    id: str = Field(primary_key=True)
    workflow_id: str = Field(index=True)
    source_node_id: str
    format: str  # json, csv
    filename: str
    content_text: str
    payload_json: Any = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow)
