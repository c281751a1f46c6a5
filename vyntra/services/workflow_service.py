"""Workflow service for business logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..core.exceptions import (
    EditRejectedError,
    WorkflowNotFoundError,
    WorkflowValidationError,
)
from ..engine.validator import ValidationResult, require_valid_document, validate_workflow_document
from ..schemas.workflow_api import (
    EditResponse,
    WorkflowDetailResponse,
    WorkflowListItem,
)
from .semantic_edit import apply_semantic_command

if TYPE_CHECKING:
    from ..engine.types import StoredWorkflow
    from ..repositories import WorkflowRepository

logger = logging.getLogger(__name__)


class WorkflowService:
    """Service for workflow operations. Every stored document is validated first."""

    def __init__(self, workflow_repo: WorkflowRepository) -> None:
        self._workflow_repo = workflow_repo

    def validate(self, raw: Any) -> ValidationResult:
        return validate_workflow_document(raw)

    async def list_workflows(self) -> list[WorkflowListItem]:
        """List all workflows."""
        workflows = await self._workflow_repo.list()
        return [
            WorkflowListItem(
                id=w.id,
                name=w.name,
                description=w.description,
                tags=w.tags,
                node_count=len(w.document.workflow.nodes),
                created_at=w.created_at.isoformat(),
                updated_at=w.updated_at.isoformat(),
            )
            for w in workflows
        ]

    async def get_stored(self, workflow_id: str) -> StoredWorkflow:
        stored = await self._workflow_repo.get(workflow_id)
        if not stored:
            raise WorkflowNotFoundError(workflow_id)
        return stored

    async def get_workflow(self, workflow_id: str) -> WorkflowDetailResponse:
        """Get a workflow by ID."""
        return self._to_detail(await self.get_stored(workflow_id))

    async def create_workflow(self, raw: Any, prompt: str | None = None) -> WorkflowDetailResponse:
        """Validate and store a new document under its own workflow id."""
        document = require_valid_document(raw)
        workflow_id = document.workflow.id
        if await self._workflow_repo.exists(workflow_id):
            raise WorkflowValidationError([f"workflow.id: Workflow {workflow_id} already exists."])

        stored = await self._workflow_repo.create(document, prompt=prompt)
        logger.info("Created workflow %s", stored.id)
        return self._to_detail(stored)

    async def update_workflow(self, workflow_id: str, raw: Any) -> WorkflowDetailResponse:
        """Replace a stored document with a validated one."""
        await self.get_stored(workflow_id)
        document = require_valid_document(raw)
        if document.workflow.id != workflow_id:
            raise WorkflowValidationError(
                [f"workflow.id: Document id {document.workflow.id} does not match {workflow_id}."]
            )

        stored = await self._workflow_repo.update(workflow_id, document)
        if stored is None:
            raise WorkflowNotFoundError(workflow_id)
        return self._to_detail(stored)

    async def delete_workflow(self, workflow_id: str) -> bool:
        """Delete a workflow."""
        deleted = await self._workflow_repo.delete(workflow_id)
        if not deleted:
            raise WorkflowNotFoundError(workflow_id)
        return True

    async def edit_workflow(self, workflow_id: str, command: str) -> EditResponse:
        """
        Apply a semantic edit command and store the result.

        Raises:
            WorkflowNotFoundError: If the workflow does not exist
            EditRejectedError: If the command cannot be applied or the edited
                document fails validation; nothing is stored
        """
        stored = await self.get_stored(workflow_id)
        result = apply_semantic_command(stored.document, command)
        if not result.ok or result.document is None:
            raise EditRejectedError(result.message, errors=result.errors)

        await self._workflow_repo.update(workflow_id, result.document)
        logger.info("Edited workflow %s: %s", workflow_id, result.message)
        return EditResponse(ok=True, message=result.message, document=result.document.to_dict())

    def _to_detail(self, stored: StoredWorkflow) -> WorkflowDetailResponse:
        return WorkflowDetailResponse(
            id=stored.id,
            name=stored.name,
            description=stored.description,
            tags=stored.tags,
            prompt=stored.prompt,
            document=stored.document.to_dict(),
            created_at=stored.created_at.isoformat(),
            updated_at=stored.updated_at.isoformat(),
        )
