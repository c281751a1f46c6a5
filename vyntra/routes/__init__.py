"""FastAPI routes for the workflow engine."""

from fastapi import APIRouter

from .workflows import router as workflows_router
from .runs import router as runs_router
from .nodes import router as nodes_router

api_router = APIRouter()
api_router.include_router(workflows_router, tags=["Workflows"])
api_router.include_router(runs_router, tags=["Runs"])
api_router.include_router(nodes_router, tags=["Nodes"])

__all__ = [
    "api_router",
]
