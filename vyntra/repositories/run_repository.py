"""Run repository for database persistence."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..db.models import RunModel, utcnow
from ..engine.types import RunRecord, RunResult


class RunRepository:
    """Repository for run history persistence."""

    def __init__(self, session: AsyncSession, max_records: int = 500) -> None:
        self._session = session
        self._max_records = max_records

    async def create(self, result: RunResult, input_source: str) -> RunRecord:
        """Store a finished run, successful or failed."""
        db_run = RunModel(
            id=result.run_id,
            workflow_id=result.workflow_id,
            status=result.status,
            mode=result.mode,
            input_json={"source": input_source, "payload": result.initial_input},
            output_json=result.output,
            steps=[step.to_dict() for step in result.steps],
            error=result.error,
            created_at=utcnow(),
            finished_at=utcnow(),
        )

        self._session.add(db_run)
        await self._session.commit()
        await self._session.refresh(db_run)

        # Cleanup old records
        await self._cleanup()

        return self._to_run_record(db_run)

    async def get(self, run_id: str) -> RunRecord | None:
        """Get a run record by ID."""
        db_run = await self._session.get(RunModel, run_id)
        if not db_run:
            return None
        return self._to_run_record(db_run)

    async def list(self, workflow_id: str | None = None) -> list[RunRecord]:
        """List run records, newest first, optionally filtered by workflow ID."""
        statement = select(RunModel).order_by(RunModel.created_at.desc())

        if workflow_id:
            statement = statement.where(RunModel.workflow_id == workflow_id)

        result = await self._session.execute(statement)
        return [self._to_run_record(r) for r in result.scalars().all()]

    async def count_since(self, workflow_id: str, since: datetime) -> int:
        """Number of runs recorded for a workflow at or after ``since``."""
        statement = (
            select(func.count())
            .select_from(RunModel)
            .where(RunModel.workflow_id == workflow_id)
            .where(RunModel.created_at >= since)
        )
        result = await self._session.execute(statement)
        return int(result.scalar_one())

    async def _cleanup(self) -> None:
        """Remove old records if over max."""
        statement = select(RunModel).order_by(RunModel.created_at.desc())
        result = await self._session.execute(statement)
        runs = result.scalars().all()

        if len(runs) > self._max_records:
            for run in runs[self._max_records:]:
                await self._session.delete(run)
            await self._session.commit()

    def _to_run_record(self, db_run: RunModel) -> RunRecord:
        """Convert database model to RunRecord."""
        steps: list[dict[str, Any]] = list(db_run.steps or [])
        return RunRecord(
            id=db_run.id,
            workflow_id=db_run.workflow_id,
            status=db_run.status,  # type: ignore[arg-type]
            mode=db_run.mode,  # type: ignore[arg-type]
            input_json=db_run.input_json or {},
            output_json=db_run.output_json,
            steps=steps,
            error=db_run.error,
            created_at=db_run.created_at,
            finished_at=db_run.finished_at,
        )
