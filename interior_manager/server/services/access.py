"""
Project access checks.

A user can access a project when they are an admin, the project's assigned
employee, its creator, or a member of it.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from interior_manager.core.database.entities.projects import Project
from interior_manager.core.database.entities.users import User
from interior_manager.core.database.repositories.projects import ProjectMemberRepository, ProjectRepository
from interior_manager.core.errors import NotFoundError, PermissionDeniedError


def has_direct_access(user: User, project: Project) -> bool:
    return user.is_admin or user.id in (project.assigned_employee_id, project.created_by)


async def check_project_access(session: AsyncSession, user: User, project_id: str) -> bool:
    """Return True when ``user`` may access ``project_id``; False for unknown projects."""
    project = await ProjectRepository(session).get_by_id(project_id)
    if project is None:
        return False
    if has_direct_access(user, project):
        return True
    return await ProjectMemberRepository(session).get_member(project_id, user.id) is not None


async def require_project_access(session: AsyncSession, user: User, project_id: str) -> Project:
    """
    Load a project the user may access.

    Raises:
        NotFoundError: The project does not exist
        PermissionDeniedError: The user has no access to it
    """
    project = await ProjectRepository(session).get_by_id(project_id)
    if project is None:
        raise NotFoundError("Project not found")
    if has_direct_access(user, project):
        return project
    if await ProjectMemberRepository(session).get_member(project_id, user.id) is None:
        raise PermissionDeniedError("Access denied")
    return project


async def accessible_project_ids(session: AsyncSession, user: User) -> Optional[List[str]]:
    """IDs of every project the user can access, or None for admins (meaning all)."""
    if user.is_admin:
        return None
    projects = await ProjectRepository(session).list_accessible(user.id)
    return [project.id for project in projects]
