"""
Project and project membership repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, or_
from sqlmodel import select

from ..entities.boq import BoqItem
from ..entities.design_files import DesignComment, DesignFile
from ..entities.payments import Invoice, Payment
from ..entities.projects import Project, ProjectMember
from ..entities.snags import Snag, SnagHistory
from ..entities.tasks import ProjectStep, ProjectStepTask, TaskActivity
from ..entities.updates import ProgressUpdate
from .base import SQLModelRepository


class ProjectRepository(SQLModelRepository[Project]):
    """Repository for projects."""

    default_order = (Project.created_at.desc(),)  # type: ignore[attr-defined]

    def __init__(self, session) -> None:
        super().__init__(session, Project)

    async def list_accessible(self, user_id: str, status: Optional[str] = None) -> List[Project]:
        """Projects a non-admin user can see: member, assignee or creator."""
        member_ids = select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
        stmt = select(Project).where(
            or_(
                Project.id.in_(member_ids),  # type: ignore[attr-defined]
                Project.assigned_employee_id == user_id,
                Project.created_by == user_id,
            )
        )
        if status:
            stmt = stmt.where(Project.status == status)
        return await self._all(stmt.order_by(*self.default_order))

    async def delete_cascade(self, project_id: str) -> bool:
        """Delete a project together with every row that belongs to it."""
        project = await self.get_by_id(project_id)
        if project is None:
            return False

        step_ids = select(ProjectStep.id).where(ProjectStep.project_id == project_id)
        design_ids = select(DesignFile.id).where(DesignFile.project_id == project_id)
        snag_ids = select(Snag.id).where(Snag.project_id == project_id)
        task_ids = select(ProjectStepTask.id).where(ProjectStepTask.step_id.in_(step_ids))  # type: ignore[attr-defined]

        await self._execute_bulk(delete(TaskActivity).where(TaskActivity.task_id.in_(task_ids)))  # type: ignore[attr-defined]
        await self._execute_bulk(delete(ProjectStepTask).where(ProjectStepTask.step_id.in_(step_ids)))  # type: ignore[attr-defined]
        await self._execute_bulk(delete(ProjectStep).where(ProjectStep.project_id == project_id))
        await self._execute_bulk(delete(ProgressUpdate).where(ProgressUpdate.project_id == project_id))
        await self._execute_bulk(delete(DesignComment).where(DesignComment.design_file_id.in_(design_ids)))  # type: ignore[attr-defined]
        await self._execute_bulk(delete(DesignFile).where(DesignFile.project_id == project_id))
        await self._execute_bulk(delete(SnagHistory).where(SnagHistory.snag_id.in_(snag_ids)))  # type: ignore[attr-defined]
        await self._execute_bulk(delete(Snag).where(Snag.project_id == project_id))
        await self._execute_bulk(delete(Payment).where(Payment.project_id == project_id))
        await self._execute_bulk(delete(Invoice).where(Invoice.project_id == project_id))
        await self._execute_bulk(delete(BoqItem).where(BoqItem.project_id == project_id))
        await self._execute_bulk(delete(ProjectMember).where(ProjectMember.project_id == project_id))
        await self.session.delete(project)
        await self.session.commit()
        return True


class ProjectMemberRepository(SQLModelRepository[ProjectMember]):
    """Repository for project membership rows."""

    def __init__(self, session) -> None:
        super().__init__(session, ProjectMember)

    async def get_member(self, project_id: str, user_id: str) -> Optional[ProjectMember]:
        stmt = select(ProjectMember).where(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id,
        )
        return await self._first(stmt)

    async def list_for_project(self, project_id: str) -> List[ProjectMember]:
        stmt = (
            select(ProjectMember)
            .where(ProjectMember.project_id == project_id)
            .order_by(ProjectMember.created_at)  # type: ignore[arg-type]
        )
        return await self._all(stmt)

    async def project_ids_for_user(self, user_id: str) -> List[str]:
        result = await self.session.execute(
            select(ProjectMember.project_id).where(ProjectMember.user_id == user_id)
        )
        return list(result.scalars().all())

    async def upsert(self, project_id: str, user_id: str, permissions: List[str]) -> tuple[ProjectMember, bool]:
        """Insert or update a membership.

        Returns:
            The membership row and whether it was newly created
        """
        member = await self.get_member(project_id, user_id)
        created = member is None
        if member is None:
            member = ProjectMember(project_id=project_id, user_id=user_id, permissions=list(permissions))
        else:
            member.permissions = list(permissions)
        self.session.add(member)
        await self.session.commit()
        await self.session.refresh(member)
        return member, created
