"""
Project step and task repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete
from sqlmodel import select

from ..entities.tasks import ProjectStep, ProjectStepTask, TaskActivity
from .base import SQLModelRepository


class ProjectStepRepository(SQLModelRepository[ProjectStep]):
    """Repository for project steps."""

    def __init__(self, session) -> None:
        super().__init__(session, ProjectStep)

    async def list_for_project(self, project_id: str) -> List[ProjectStep]:
        stmt = (
            select(ProjectStep)
            .where(ProjectStep.project_id == project_id)
            .order_by(ProjectStep.stage, ProjectStep.sort_order)
        )
        return await self._all(stmt)

    async def delete_with_tasks(self, step_id: str) -> bool:
        step = await self.get_by_id(step_id)
        if step is None:
            return False
        task_ids = select(ProjectStepTask.id).where(ProjectStepTask.step_id == step_id)
        await self._execute_bulk(delete(TaskActivity).where(TaskActivity.task_id.in_(task_ids)))  # type: ignore[attr-defined]
        await self._execute_bulk(delete(ProjectStepTask).where(ProjectStepTask.step_id == step_id))
        await self.session.delete(step)
        await self.session.commit()
        return True


class TaskRepository(SQLModelRepository[ProjectStepTask]):
    """Repository for tasks within project steps."""

    def __init__(self, session) -> None:
        super().__init__(session, ProjectStepTask)

    async def list_for_step(self, step_id: str) -> List[ProjectStepTask]:
        stmt = (
            select(ProjectStepTask)
            .where(ProjectStepTask.step_id == step_id)
            .order_by(ProjectStepTask.created_at)  # type: ignore[arg-type]
        )
        return await self._all(stmt)

    async def list_for_assignee(self, user_id: str) -> List[ProjectStepTask]:
        stmt = (
            select(ProjectStepTask)
            .where(ProjectStepTask.assigned_to == user_id)
            .order_by(ProjectStepTask.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)

    async def get_many(self, task_ids: List[str]) -> List[ProjectStepTask]:
        if not task_ids:
            return []
        return await self._all(select(ProjectStepTask).where(ProjectStepTask.id.in_(task_ids)))  # type: ignore[attr-defined]

    async def update_many(self, tasks: List[ProjectStepTask]) -> int:
        for task in tasks:
            self.session.add(task)
        await self.session.commit()
        return len(tasks)

    async def delete_with_activity(self, task_id: str) -> bool:
        task = await self.get_by_id(task_id)
        if task is None:
            return False
        await self._execute_bulk(delete(TaskActivity).where(TaskActivity.task_id == task_id))
        await self.session.delete(task)
        await self.session.commit()
        return True


class TaskActivityRepository(SQLModelRepository[TaskActivity]):
    """Repository for the append-only task activity log."""

    def __init__(self, session) -> None:
        super().__init__(session, TaskActivity)

    async def list_for_task(self, task_id: str) -> List[TaskActivity]:
        """Timeline of a task, newest entry first."""
        stmt = (
            select(TaskActivity)
            .where(TaskActivity.task_id == task_id)
            .order_by(TaskActivity.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)

    def record(
        self,
        task_id: str,
        user_id: str,
        activity_type: str,
        old_value: Optional[str] = None,
        new_value: Optional[str] = None,
        comment: Optional[str] = None,
    ) -> TaskActivity:
        """Stage an activity row in the session; the caller commits."""
        activity = TaskActivity(
            task_id=task_id,
            user_id=user_id,
            activity_type=activity_type,
            old_value=old_value,
            new_value=new_value,
            comment=comment,
        )
        self.session.add(activity)
        return activity
