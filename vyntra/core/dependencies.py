"""FastAPI dependency injection for the workflow engine."""

from __future__ import annotations

from functools import lru_cache
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings


# --- Database Session Dependency ---


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get async database session."""
    from ..db import get_session

    async for session in get_session():
        yield session


# --- Repository Dependencies ---


def get_workflow_repository(session: AsyncSession = Depends(get_db_session)):
    """Get workflow repository instance."""
    from ..repositories import WorkflowRepository

    return WorkflowRepository(session)


def get_run_repository(session: AsyncSession = Depends(get_db_session)):
    """Get run repository instance."""
    from ..repositories import RunRepository

    return RunRepository(session, max_records=settings.max_run_records)


def get_record_repository(session: AsyncSession = Depends(get_db_session)):
    """Get record repository instance."""
    from ..repositories import RecordRepository

    return RecordRepository(session)


@lru_cache
def get_node_registry():
    """Get node registry instance with the built-in nodes registered."""
    from ..engine.node_registry import node_registry, register_all_nodes

    register_all_nodes()
    return node_registry


@lru_cache
def get_completion_backend():
    """Get the completion backend used by live runs and generation."""
    from ..engine.llm_provider import LLMCompletion

    return LLMCompletion()


# --- Service Dependencies ---


def get_workflow_service(
    workflow_repo=Depends(get_workflow_repository),
):
    """Get workflow service instance."""
    from ..services.workflow_service import WorkflowService

    return WorkflowService(workflow_repo)


def get_run_service(
    workflow_repo=Depends(get_workflow_repository),
    run_repo=Depends(get_run_repository),
    record_repo=Depends(get_record_repository),
    completion=Depends(get_completion_backend),
):
    """Get run service instance."""
    from ..services.run_service import RunService

    return RunService(workflow_repo, run_repo, record_repo, completion)


def get_generation_service(
    completion=Depends(get_completion_backend),
):
    """Get generation service instance."""
    from ..services.generation_service import GenerationService

    return GenerationService(completion)
