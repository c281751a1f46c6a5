"""Run service - the run invocation surface and run history."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import RunLimitExceededError, RunNotFoundError, WorkflowNotFoundError
from ..db.models import utcnow
from ..engine.effects import LiveEffects, SimulatedEffects
from ..engine.validator import require_valid_document
from ..engine.workflow_runner import WorkflowRunner
from ..schemas.run import (
    RunDetailResponse,
    RunListItem,
    RunResponse,
    SimulateResponse,
    StepSchema,
)

if TYPE_CHECKING:
    from ..engine.effects import CompletionBackend, EffectBackend
    from ..engine.types import ExecutionEventCallback, RunRecord, RunResult
    from ..repositories import RecordRepository, RunRepository, WorkflowRepository

logger = logging.getLogger(__name__)


def month_start(now: datetime) -> datetime:
    """Start of the calendar month containing ``now``."""
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class RunService:
    """Runs stored workflows, persists every finished run and serves run history."""

    def __init__(
        self,
        workflow_repo: WorkflowRepository,
        run_repo: RunRepository,
        record_repo: RecordRepository,
        completion: CompletionBackend,
        config: Settings | None = None,
    ) -> None:
        self._workflow_repo = workflow_repo
        self._run_repo = run_repo
        self._record_repo = record_repo
        self._completion = completion
        self._config = config or default_settings

    async def run_workflow(
        self,
        workflow_id: str,
        input_json: Any = None,
        mode: str | None = None,
        on_event: ExecutionEventCallback | None = None,
    ) -> RunResponse:
        """
        Run a stored workflow and persist the run record.

        A failed run is persisted before the failure response is returned.

        Raises:
            WorkflowNotFoundError: If the workflow does not exist
            RunLimitExceededError: If the monthly run limit is reached
            SchedulingError: If the graph cannot be ordered; nothing is persisted
        """
        stored = await self._workflow_repo.get(workflow_id)
        if not stored:
            raise WorkflowNotFoundError(workflow_id)

        await self._check_run_limit(workflow_id)

        mode = mode or self._config.run_mode
        runner = WorkflowRunner(self._effects(mode, workflow_id))
        result = await runner.run(stored.document, input_json, on_event=on_event)
        await self._run_repo.create(result, input_source=f"run-{mode}")

        if result.status == "failed":
            return RunResponse(
                ok=False,
                error="Run failed",
                run_id=result.run_id,
                details=result.error,
            )
        return RunResponse(
            ok=True,
            run_id=result.run_id,
            output_json=result.output,
            steps_count=len(result.steps),
        )

    async def simulate(self, raw_document: Any, input_json: Any = None) -> SimulateResponse:
        """Dry-run an unsaved document. Nothing is persisted."""
        document = require_valid_document(raw_document)
        result = await WorkflowRunner(SimulatedEffects()).run(document, input_json)
        return SimulateResponse(
            run_id=result.run_id,
            status=result.status,
            mode=result.mode,
            output_json=result.output,
            steps=[StepSchema(**step.to_dict()) for step in result.steps],
            error=result.error,
        )

    async def list_runs(self, workflow_id: str | None = None) -> list[RunListItem]:
        """List run history."""
        runs = await self._run_repo.list(workflow_id)
        return [
            RunListItem(
                id=r.id,
                workflow_id=r.workflow_id,
                status=r.status,
                mode=r.mode,
                created_at=r.created_at.isoformat(),
                steps_count=len(r.steps),
                error=r.error,
            )
            for r in runs
        ]

    async def get_run(self, run_id: str) -> RunDetailResponse:
        """Get run details."""
        run = await self._run_repo.get(run_id)
        if not run:
            raise RunNotFoundError(run_id)
        return self._to_detail(run)

    def _effects(self, mode: str, workflow_id: str) -> EffectBackend:
        if mode == "live":
            return LiveEffects(self._completion, self._record_repo, workflow_id)
        return SimulatedEffects()

    async def _check_run_limit(self, workflow_id: str) -> None:
        period_start = month_start(utcnow())
        count = await self._run_repo.count_since(workflow_id, period_start)
        if count >= self._config.run_monthly_limit:
            logger.warning("Run limit reached for workflow %s (%d runs)", workflow_id, count)
            raise RunLimitExceededError(self._config.run_monthly_limit, period_start.isoformat())

    def _to_detail(self, run: RunRecord) -> RunDetailResponse:
        return RunDetailResponse(
            id=run.id,
            workflow_id=run.workflow_id,
            status=run.status,
            mode=run.mode,
            input_json=run.input_json,
            output_json=run.output_json,
            steps=[StepSchema(**step) for step in run.steps],
            error=run.error,
            created_at=run.created_at.isoformat(),
            finished_at=run.finished_at.isoformat() if run.finished_at else None,
        )
