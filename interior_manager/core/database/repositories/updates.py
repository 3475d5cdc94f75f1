"""
Project progress update repository.
"""

from __future__ import annotations

from typing import List

from sqlmodel import select

from ..entities.updates import ProgressUpdate
from .base import SQLModelRepository


class ProgressUpdateRepository(SQLModelRepository[ProgressUpdate]):
    def __init__(self, session) -> None:
        super().__init__(session, ProgressUpdate)

    async def list_for_project(self, project_id: str) -> List[ProgressUpdate]:
        """A project's updates, latest ``update_date`` first."""
        stmt = (
            select(ProgressUpdate)
            .where(ProgressUpdate.project_id == project_id)
            .order_by(
                ProgressUpdate.update_date.desc(),  # type: ignore[attr-defined]
                ProgressUpdate.created_at.desc(),  # type: ignore[attr-defined]
            )
        )
        return await self._all(stmt)
