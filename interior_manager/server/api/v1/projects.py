"""
Project endpoints.

Admins see every project; everyone else sees the projects they created, are
assigned to, or are a member of. The budget is only returned to callers
holding ``projects.view_budget`` on the project.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from interior_manager.core.database.base import utc_now
from interior_manager.core.database.entities.projects import Project
from interior_manager.core.database.entities.users import User
from interior_manager.core.database.repositories.projects import ProjectRepository
from interior_manager.core.errors import NotFoundError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import PermissionNode, ProjectStatus
from interior_manager.core.models.io.projects import ProjectCreate, ProjectRead, ProjectUpdate
from interior_manager.server.services.access import require_project_access
from interior_manager.server.services.deps import CurrentUser, NotificationServiceDep, RBACDep, SessionDep
from interior_manager.server.services.rbac import RBACService

logger = get_logger(__name__)

router = APIRouter(tags=["projects"])


async def _project_read(rbac: RBACService, user: User, project: Project) -> ProjectRead:
    data = ProjectRead.model_validate(project)
    if not (await rbac.check_permission(user, PermissionNode.projects_view_budget, project.id)).allowed:
        data.project_budget = None
    return data


@router.get(
    "",
    response_model=List[ProjectRead],
    summary="List Projects",
    description="List the projects visible to the caller, newest first.",
)
async def list_projects(
    user: CurrentUser,
    rbac: RBACDep,
    session: SessionDep,
    status_filter: Optional[ProjectStatus] = Query(default=None, alias="status", description="Filter by status"),
) -> List[ProjectRead]:
    repository = ProjectRepository(session)
    status_value = status_filter.value if status_filter else None
    if user.is_admin:
        projects = await repository.list(filters={"status": status_value})
    else:
        projects = await repository.list_accessible(user.id, status_value)
    return [await _project_read(rbac, user, project) for project in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get Project",
    responses={403: {"description": "Access denied"}, 404: {"description": "Project not found"}},
)
async def get_project(project_id: str, user: CurrentUser, rbac: RBACDep, session: SessionDep) -> ProjectRead:
    project = await require_project_access(session, user, project_id)
    return await _project_read(rbac, user, project)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description="Create a project owned by the caller. Requires `projects.create`.",
)
async def create_project(payload: ProjectCreate, user: CurrentUser, rbac: RBACDep, session: SessionDep) -> ProjectRead:
    """
    Create a project.

    - **title**: at least 2 characters.
    - **status**: defaults to pending.
    - **assigned_employee_id**: optional employee in charge of the site.
    """
    await rbac.verify_permission(user, PermissionNode.projects_create)
    project = await ProjectRepository(session).create(Project(**payload.model_dump(), created_by=user.id))
    logger.info(f"Project created: {project.id} ({project.title}) by {user.id}")
    return await _project_read(rbac, user, project)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update Project",
    description="Partially update a project. Requires `projects.edit` on the project.",
    responses={403: {"description": "Permission denied"}, 404: {"description": "Project not found"}},
)
async def update_project(
    project_id: str,
    payload: ProjectUpdate,
    user: CurrentUser,
    rbac: RBACDep,
    session: SessionDep,
    notifications: NotificationServiceDep,
) -> ProjectRead:
    project = await require_project_access(session, user, project_id)
    await rbac.verify_permission(user, PermissionNode.projects_edit, project_id)

    changes = payload.model_dump(exclude_unset=True)
    previous_assignee = project.assigned_employee_id
    for key, value in changes.items():
        setattr(project, key, value)
    if changes.get("status") == ProjectStatus.completed.value and project.actual_completion_date is None:
        project.actual_completion_date = utc_now().date()
    project.updated_at = utc_now()
    project = await ProjectRepository(session).update(project)

    new_assignee = project.assigned_employee_id
    if new_assignee and new_assignee != previous_assignee and new_assignee != user.id:
        await notifications.notify_project_update(
            new_assignee, project.title, f'You have been assigned to project "{project.title}"', project.id
        )
    return await _project_read(rbac, user, project)


@router.delete(
    "/{project_id}",
    summary="Delete Project",
    description="Delete a project and everything that belongs to it. Requires `projects.delete`.",
    responses={404: {"description": "Project not found"}},
)
async def delete_project(project_id: str, user: CurrentUser, rbac: RBACDep, session: SessionDep):
    await rbac.verify_permission(user, PermissionNode.projects_delete, project_id)
    if not await ProjectRepository(session).delete_cascade(project_id):
        raise NotFoundError("Project not found")
    logger.info(f"Project deleted: {project_id} by {user.id}")
    return {"success": True}
