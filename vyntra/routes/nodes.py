"""Node catalog routes."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from ..core.dependencies import get_node_registry
from ..schemas.workflow_api import NodeTypeResponse

router = APIRouter(prefix="/nodes")


@router.get("", response_model=list[NodeTypeResponse])
async def list_nodes(registry=Depends(get_node_registry)) -> list[NodeTypeResponse]:
    """List every registered node type with its category and defaults."""
    return [NodeTypeResponse(**asdict(info)) for info in registry.get_node_info_full()]


@router.get("/{node_type}", response_model=NodeTypeResponse)
async def get_node(node_type: str, registry=Depends(get_node_registry)) -> NodeTypeResponse:
    """Get one node type."""
    info = registry.get_node_type_info(node_type)
    if info is None:
        raise HTTPException(status_code=404, detail=f"Node type not found: {node_type}")
    return NodeTypeResponse(**asdict(info))
