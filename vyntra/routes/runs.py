"""Run history routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.dependencies import get_run_service
from ..core.exceptions import RunNotFoundError
from ..schemas.run import RunDetailResponse, RunListItem
from ..services.run_service import RunService

router = APIRouter(prefix="/runs")


# Type alias for dependency injection
RunServiceDep = Annotated[RunService, Depends(get_run_service)]


@router.get("", response_model=list[RunListItem])
async def list_runs(
    service: RunServiceDep,
    workflow_id: str | None = Query(None, description="Filter by workflow ID"),
) -> list[RunListItem]:
    """List run history."""
    return await service.list_runs(workflow_id)


@router.get("/{run_id}", response_model=RunDetailResponse)
async def get_run(run_id: str, service: RunServiceDep) -> RunDetailResponse:
    """Get run details."""
    try:
        return await service.get_run(run_id)
    except RunNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
