"""
Project progress update endpoints.

Updates are dated posts on a project's work-progress timeline. Anyone with
access to the project may read and post; only the author or an administrator
may edit or delete a post. New posts notify the project creator and the
assigned employee.
"""

from typing import List

from fastapi import APIRouter, Query, status

from interior_manager.core.database.base import utc_now
from interior_manager.core.database.entities.updates import ProgressUpdate
from interior_manager.core.database.entities.users import User
from interior_manager.core.database.repositories.updates import ProgressUpdateRepository
from interior_manager.core.database.repositories.users import UserRepository
from interior_manager.core.errors import NotFoundError, PermissionDeniedError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import NotificationType, UserRole
from interior_manager.core.models.io.auth import UserRef
from interior_manager.core.models.io.updates import (
    ProgressUpdateCreate,
    ProgressUpdateEdit,
    ProgressUpdateList,
    ProgressUpdateRead,
    ProgressUpdateResponse,
)
from interior_manager.server.services.access import require_project_access
from interior_manager.server.services.deps import CurrentUser, NotificationServiceDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["project-updates"])

PREVIEW_LENGTH = 100


async def _with_authors(session, updates: List[ProgressUpdate]) -> List[ProgressUpdateRead]:
    authors = {u.id: u for u in await UserRepository(session).get_many(list({u.user_id for u in updates}))}
    result = []
    for update in updates:
        read = ProgressUpdateRead.model_validate(update)
        author = authors.get(update.user_id)
        read.user = UserRef.model_validate(author) if author else None
        result.append(read)
    return result


async def _load_own_update(session, user: User, update_id: str) -> ProgressUpdate:
    update = await ProgressUpdateRepository(session).get_by_id(update_id)
    if update is None:
        raise NotFoundError("Update not found")
    await require_project_access(session, user, update.project_id)
    if update.user_id != user.id and user.role != UserRole.admin.value:
        raise PermissionDeniedError("Only the author or an admin can change this update")
    return update


def _preview(text: str) -> str:
    return text if len(text) <= PREVIEW_LENGTH else f"{text[:PREVIEW_LENGTH].rstrip()}..."


@router.get(
    "",
    response_model=ProgressUpdateList,
    summary="List Project Updates",
    description="A project's progress updates, latest update date first.",
)
async def list_updates(
    user: CurrentUser, session: SessionDep, project_id: str = Query(description="Project whose updates to list")
) -> ProgressUpdateList:
    await require_project_access(session, user, project_id)
    updates = await ProgressUpdateRepository(session).list_for_project(project_id)
    return ProgressUpdateList(updates=await _with_authors(session, updates))


@router.post(
    "",
    response_model=ProgressUpdateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post Project Update",
    description="Post a dated progress update. The project creator and assigned employee are notified.",
)
async def create_update(
    payload: ProgressUpdateCreate,
    user: CurrentUser,
    session: SessionDep,
    notifications: NotificationServiceDep,
) -> ProgressUpdateResponse:
    """
    Post an update.

    - **update_date**: the day the work was done.
    - **description**: what happened on site.
    - **photos**: optional photo URLs.
    - **audio_url**: optional voice note.
    """
    project = await require_project_access(session, user, payload.project_id)
    update = await ProgressUpdateRepository(session).create(ProgressUpdate(**payload.model_dump(), user_id=user.id))
    logger.info(f"Project update posted: {update.id} on {project.id} by {user.id}")

    await notifications.notify_users(
        [project.created_by, project.assigned_employee_id],
        f"Project Update: {project.title}",
        f"{user.full_name} posted an update: {_preview(update.description)}",
        NotificationType.project_update,
        project.id,
        "project",
        exclude=user.id,
    )
    (read,) = await _with_authors(session, [update])
    return ProgressUpdateResponse(update=read)


@router.patch(
    "/{update_id}",
    response_model=ProgressUpdateResponse,
    summary="Edit Project Update",
    responses={403: {"description": "Not the author"}, 404: {"description": "Update not found"}},
)
async def edit_update(
    update_id: str, payload: ProgressUpdateEdit, user: CurrentUser, session: SessionDep
) -> ProgressUpdateResponse:
    update = await _load_own_update(session, user, update_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(update, key, value)
    update.updated_at = utc_now()
    update = await ProgressUpdateRepository(session).update(update)
    (read,) = await _with_authors(session, [update])
    return ProgressUpdateResponse(update=read)


@router.delete(
    "/{update_id}",
    summary="Delete Project Update",
    responses={403: {"description": "Not the author"}, 404: {"description": "Update not found"}},
)
async def delete_update(update_id: str, user: CurrentUser, session: SessionDep):
    update = await _load_own_update(session, user, update_id)
    await ProgressUpdateRepository(session).delete(update.id)
    logger.info(f"Project update deleted: {update_id} by {user.id}")
    return {"success": True}
