"""Workflow routes."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse

from ..core.dependencies import get_generation_service, get_run_service, get_workflow_service
from ..core.exceptions import (
    CompletionError,
    EditRejectedError,
    GenerationError,
    RunLimitExceededError,
    SchedulingError,
    WorkflowNotFoundError,
    WorkflowValidationError,
)
from ..schemas.common import SuccessResponse
from ..schemas.run import RunResponse, RunWorkflowRequest, SimulateRequest, SimulateResponse
from ..schemas.workflow_api import (
    EditRequest,
    EditResponse,
    GenerateRequest,
    GenerateResponse,
    ValidateResponse,
    WorkflowDetailResponse,
    WorkflowListItem,
)
from ..services.generation_service import GenerationService
from ..services.run_service import RunService
from ..services.workflow_service import WorkflowService

router = APIRouter(prefix="/workflows")


# Type aliases for dependency injection
WorkflowServiceDep = Annotated[WorkflowService, Depends(get_workflow_service)]
RunServiceDep = Annotated[RunService, Depends(get_run_service)]
GenerationServiceDep = Annotated[GenerationService, Depends(get_generation_service)]
DocumentBody = Annotated[dict[str, Any], Body(description="Workflow document")]


def _invalid(e: WorkflowValidationError | EditRejectedError | GenerationError) -> HTTPException:
    return HTTPException(status_code=422, detail={"error": e.message, "errors": e.errors})


@router.post("/validate", response_model=ValidateResponse)
async def validate_workflow(document: DocumentBody, service: WorkflowServiceDep) -> ValidateResponse:
    """Validate a document without storing it."""
    result = service.validate(document)
    return ValidateResponse(ok=result.ok, errors=result.errors)


@router.post("/simulate", response_model=SimulateResponse)
async def simulate_workflow(request: SimulateRequest, service: RunServiceDep) -> SimulateResponse:
    """Dry-run a document with deterministic stubs. Nothing is stored."""
    try:
        return await service.simulate(request.document, request.input_json)
    except WorkflowValidationError as e:
        raise _invalid(e)
    except SchedulingError as e:
        raise HTTPException(status_code=422, detail=e.message)


@router.post("/generate", response_model=GenerateResponse)
async def generate_workflow(request: GenerateRequest, service: GenerationServiceDep) -> GenerateResponse:
    """Generate a validated document from a natural-language prompt."""
    try:
        document = await service.generate(
            request.prompt,
            name=request.name,
            description=request.description,
            tags=request.tags,
        )
    except GenerationError as e:
        raise _invalid(e)
    except CompletionError as e:
        raise HTTPException(status_code=502, detail=e.message)
    return GenerateResponse(document=document.to_dict())


@router.get("", response_model=list[WorkflowListItem])
async def list_workflows(service: WorkflowServiceDep) -> list[WorkflowListItem]:
    """List all workflows."""
    return await service.list_workflows()


@router.get("/{workflow_id}", response_model=WorkflowDetailResponse)
async def get_workflow(workflow_id: str, service: WorkflowServiceDep) -> WorkflowDetailResponse:
    """Get a single workflow by ID."""
    try:
        return await service.get_workflow(workflow_id)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("", response_model=WorkflowDetailResponse, status_code=201)
async def create_workflow(document: DocumentBody, service: WorkflowServiceDep) -> WorkflowDetailResponse:
    """Create a new workflow."""
    try:
        return await service.create_workflow(document)
    except WorkflowValidationError as e:
        raise _invalid(e)


@router.put("/{workflow_id}", response_model=WorkflowDetailResponse)
async def update_workflow(
    workflow_id: str,
    document: DocumentBody,
    service: WorkflowServiceDep,
) -> WorkflowDetailResponse:
    """Replace a workflow's document."""
    try:
        return await service.update_workflow(workflow_id, document)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except WorkflowValidationError as e:
        raise _invalid(e)


@router.delete("/{workflow_id}", response_model=SuccessResponse)
async def delete_workflow(workflow_id: str, service: WorkflowServiceDep) -> SuccessResponse:
    """Delete a workflow."""
    try:
        await service.delete_workflow(workflow_id)
        return SuccessResponse(message="Workflow deleted")
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/{workflow_id}/edit", response_model=EditResponse)
async def edit_workflow(
    workflow_id: str,
    request: EditRequest,
    service: WorkflowServiceDep,
) -> EditResponse:
    """Apply a semantic edit command."""
    try:
        return await service.edit_workflow(workflow_id, request.command)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except EditRejectedError as e:
        raise _invalid(e)


@router.post("/{workflow_id}/run", response_model=RunResponse)
async def run_workflow(
    workflow_id: str,
    service: RunServiceDep,
    request: RunWorkflowRequest | None = None,
) -> RunResponse | JSONResponse:
    """Run a stored workflow. A failed run answers 500 with its run id."""
    request = request or RunWorkflowRequest()
    try:
        response = await service.run_workflow(workflow_id, request.input_json, request.mode)
    except WorkflowNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except RunLimitExceededError as e:
        raise HTTPException(status_code=429, detail={"error": e.message, **e.details})
    except SchedulingError as e:
        raise HTTPException(status_code=422, detail=e.message)

    if not response.ok:
        return JSONResponse(status_code=500, content=response.model_dump())
    return response
