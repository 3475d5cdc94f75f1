"""
Project membership endpoints.
"""

from typing import List

from fastapi import APIRouter

from interior_manager.core.database.repositories.projects import ProjectMemberRepository, ProjectRepository
from interior_manager.core.database.repositories.users import UserRepository
from interior_manager.core.errors import NotFoundError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import NotificationType
from interior_manager.core.models.io.projects import ProjectMemberRead, ProjectMemberUpsert
from interior_manager.server.services.access import require_project_access
from interior_manager.server.services.deps import AdminUser, CurrentUser, NotificationServiceDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["project-members"])


@router.get(
    "/{project_id}/members",
    response_model=List[ProjectMemberRead],
    summary="List Project Members",
    description="List members of a project with their names and emails.",
)
async def list_members(project_id: str, user: CurrentUser, session: SessionDep) -> List[ProjectMemberRead]:
    await require_project_access(session, user, project_id)
    members = await ProjectMemberRepository(session).list_for_project(project_id)
    users = {u.id: u for u in await UserRepository(session).get_many([m.user_id for m in members])}

    result = []
    for member in members:
        data = ProjectMemberRead.model_validate(member)
        account = users.get(member.user_id)
        if account is not None:
            data.full_name = account.full_name
            data.email = account.email
        result.append(data)
    return result


@router.put(
    "/{project_id}/members",
    response_model=ProjectMemberRead,
    summary="Add or Update Member",
    description="Add a user to a project or replace their project permissions.",
    responses={404: {"description": "Project or user not found"}},
)
async def upsert_member(
    project_id: str,
    payload: ProjectMemberUpsert,
    admin: AdminUser,
    session: SessionDep,
    notifications: NotificationServiceDep,
) -> ProjectMemberRead:
    """
    Upsert a membership.

    - **user_id**: the user being added.
    - **permissions**: permission codes on this project, or `["*"]` for all.
    """
    project = await ProjectRepository(session).get_by_id(project_id)
    if project is None:
        raise NotFoundError("Project not found")
    account = await UserRepository(session).get_by_id(payload.user_id)
    if account is None:
        raise NotFoundError("User not found")

    member, created = await ProjectMemberRepository(session).upsert(project_id, account.id, payload.permissions)
    logger.info(f"Project member {'added' if created else 'updated'}: {account.id} on {project_id}")

    await notifications.create_notification(
        account.id,
        "Added to Project",
        f'You have been added to project "{project.title}"',
        NotificationType.task_assigned,
        project.id,
        "project",
    )
    if project.created_by and project.created_by != account.id:
        await notifications.create_notification(
            project.created_by,
            "Project Member Updated",
            f'{account.full_name} was given access to project "{project.title}"',
            NotificationType.project_update,
            project.id,
            "project",
        )

    data = ProjectMemberRead.model_validate(member)
    data.full_name = account.full_name
    data.email = account.email
    return data


@router.delete(
    "/{project_id}/members/{user_id}",
    summary="Remove Member",
    responses={404: {"description": "Not a member"}},
)
async def remove_member(project_id: str, user_id: str, admin: AdminUser, session: SessionDep):
    repository = ProjectMemberRepository(session)
    member = await repository.get_member(project_id, user_id)
    if member is None:
        raise NotFoundError("Member not found")
    await repository.delete(member.id)
    logger.info(f"Project member removed: {user_id} from {project_id} by {admin.id}")
    return {"success": True}
