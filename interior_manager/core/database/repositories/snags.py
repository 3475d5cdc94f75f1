"""
Snag and snag history repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import select

from ..entities.projects import ProjectMember
from ..entities.snags import Snag, SnagHistory
from .base import SQLModelRepository


class SnagRepository(SQLModelRepository[Snag]):
    """Repository for snags."""

    default_order = (Snag.created_at.desc(),)  # type: ignore[attr-defined]

    def __init__(self, session) -> None:
        super().__init__(session, Snag)

    async def list_for_project(self, project_id: str) -> List[Snag]:
        stmt = select(Snag).where(Snag.project_id == project_id).order_by(*self.default_order)
        return await self._all(stmt)

    async def list_visible_to(self, user_id: str) -> List[Snag]:
        """Snags in the user's member projects, assigned to them, or created by them."""
        member_projects = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
        stmt = (
            select(Snag)
            .where(
                or_(
                    Snag.project_id.in_(member_projects),  # type: ignore[union-attr]
                    Snag.assigned_to_user_id == user_id,
                    Snag.created_by == user_id,
                )
            )
            .order_by(*self.default_order)
        )
        return await self._all(stmt)


class SnagHistoryRepository(SQLModelRepository[SnagHistory]):
    """Repository for the snag status audit trail."""

    def __init__(self, session) -> None:
        super().__init__(session, SnagHistory)

    async def list_for_snag(self, snag_id: str) -> List[SnagHistory]:
        stmt = (
            select(SnagHistory)
            .where(SnagHistory.snag_id == snag_id)
            .order_by(SnagHistory.created_at)  # type: ignore[arg-type]
        )
        return await self._all(stmt)

    def record(
        self,
        snag: Snag,
        action: str,
        from_status: Optional[str],
        actor_id: Optional[str],
        note: Optional[str] = None,
    ) -> SnagHistory:
        """Stage a history row for ``snag``'s current status; committed with the snag."""
        entry = SnagHistory(
            snag_id=snag.id,
            action=action,
            from_status=from_status,
            to_status=snag.status,
            actor_id=actor_id,
            note=note,
        )
        self.session.add(entry)
        return entry
