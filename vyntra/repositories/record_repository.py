"""Record repository - rows written by output nodes during live runs."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from ..core.exceptions import NodeExecutionError
from ..db.models import ExportModel, ItemModel

TABLES: dict[str, type[SQLModel]] = {
    ItemModel.__tablename__: ItemModel,
    ExportModel.__tablename__: ExportModel,
}


class RecordRepository:
    """Inserts into the tables output nodes may write to."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(self, table: str, values: dict[str, Any]) -> str:
        """Insert one row and return its generated id."""
        model = TABLES.get(table)
        if model is None:
            raise NodeExecutionError(f"Unknown table: {table}")

        row_id = uuid.uuid4().hex
        row = model(id=row_id, **values)
        self._session.add(row)
        try:
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        return row_id
