"""Workflow repository for database persistence."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..db.models import WorkflowModel, utcnow
from ..engine.types import StoredWorkflow
from ..schemas.workflow import WorkflowDocument


class WorkflowRepository:
    """Repository for workflow persistence."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, document: WorkflowDocument, prompt: str | None = None) -> StoredWorkflow:
        """Create a new workflow from a validated document."""
        workflow = document.workflow
        now = utcnow()

        db_workflow = WorkflowModel(
            id=workflow.id,
            name=workflow.name,
            description=workflow.description,
            prompt=prompt,
            tags=list(workflow.tags),
            definition=document.to_dict(),
            created_at=now,
            updated_at=now,
        )

        self._session.add(db_workflow)
        await self._session.commit()
        await self._session.refresh(db_workflow)

        return self._to_stored_workflow(db_workflow)

    async def get(self, workflow_id: str) -> StoredWorkflow | None:
        """Get a workflow by ID."""
        result = await self._session.get(WorkflowModel, workflow_id)
        if not result:
            return None
        return self._to_stored_workflow(result)

    async def exists(self, workflow_id: str) -> bool:
        return await self._session.get(WorkflowModel, workflow_id) is not None

    async def list(self) -> list[StoredWorkflow]:
        """List all workflows, most recently updated first."""
        statement = select(WorkflowModel).order_by(WorkflowModel.updated_at.desc())
        result = await self._session.execute(statement)
        workflows = result.scalars().all()
        return [self._to_stored_workflow(w) for w in workflows]

    async def update(self, workflow_id: str, document: WorkflowDocument) -> StoredWorkflow | None:
        """Replace the stored document; the id stays the one in the URL."""
        db_workflow = await self._session.get(WorkflowModel, workflow_id)
        if not db_workflow:
            return None

        workflow = document.workflow
        db_workflow.name = workflow.name
        db_workflow.description = workflow.description
        db_workflow.tags = list(workflow.tags)
        db_workflow.definition = document.to_dict()
        db_workflow.updated_at = utcnow()

        await self._session.commit()
        await self._session.refresh(db_workflow)

        return self._to_stored_workflow(db_workflow)

    async def delete(self, workflow_id: str) -> bool:
        """Delete a workflow."""
        db_workflow = await self._session.get(WorkflowModel, workflow_id)
        if not db_workflow:
            return False

        await self._session.delete(db_workflow)
        await self._session.commit()
        return True

    def _to_stored_workflow(self, db_workflow: WorkflowModel) -> StoredWorkflow:
        """Convert database model to StoredWorkflow."""
        return StoredWorkflow(
            id=db_workflow.id,
            name=db_workflow.name,
            description=db_workflow.description,
            document=WorkflowDocument.model_validate(db_workflow.definition),
            tags=list(db_workflow.tags or []),
            prompt=db_workflow.prompt,
            created_at=db_workflow.created_at,
            updated_at=db_workflow.updated_at,
        )
