"""
Snag endpoints.

A snag is a defect found on site. It moves through
open -> assigned -> resolved -> verified -> closed and can be reopened.
Every transition is recorded in ``snag_history``.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from interior_manager.core.database.base import utc_now
from interior_manager.core.database.entities.projects import Project
from interior_manager.core.database.entities.snags import Snag
from interior_manager.core.database.entities.users import User
from interior_manager.core.database.repositories.projects import ProjectRepository
from interior_manager.core.database.repositories.snags import SnagHistoryRepository, SnagRepository
from interior_manager.core.errors import NotFoundError, PermissionDeniedError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import PermissionNode, SnagAction, SnagStatus
from interior_manager.core.models.io.snags import SnagCreate, SnagHistoryRead, SnagRead, SnagUpdate
from interior_manager.server.services.access import check_project_access, require_project_access
from interior_manager.server.services.deps import CurrentUser, NotificationServiceDep, RBACDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["snags"])

FIELD_UPDATES = ("description", "location", "category", "priority", "photos")


def _context_name(snag: Snag, project: Optional[Project]) -> str:
    if project is not None:
        return project.title
    return snag.site_name or "General Snag"


async def _load_snag(session, user: User, snag_id: str) -> tuple[Snag, Optional[Project]]:
    """Load a snag the caller may work on: admin, creator, assignee or anyone with project access."""
    snag = await SnagRepository(session).get_by_id(snag_id)
    if snag is None:
        raise NotFoundError("Snag not found")
    project = await ProjectRepository(session).get_by_id(snag.project_id) if snag.project_id else None

    if user.is_admin or user.id in (snag.created_by, snag.assigned_to_user_id):
        return snag, project
    if project is not None and await check_project_access(session, user, project.id):
        return snag, project
    raise PermissionDeniedError("Access denied")


@router.get(
    "",
    response_model=List[SnagRead],
    summary="List Snags",
    description="List the snags of a project, or with `all=true` every snag visible to the caller.",
    responses={400: {"description": "Neither project_id nor all given"}},
)
async def list_snags(
    user: CurrentUser,
    session: SessionDep,
    project_id: Optional[str] = Query(default=None),
    all_snags: bool = Query(default=False, alias="all"),
) -> List[SnagRead]:
    repository = SnagRepository(session)
    if project_id:
        await require_project_access(session, user, project_id)
        snags = await repository.list_for_project(project_id)
    elif all_snags:
        snags = await repository.list() if user.is_admin else await repository.list_visible_to(user.id)
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="project_id or all=true is required")
    return [SnagRead.model_validate(snag) for snag in snags]


@router.post(
    "",
    response_model=SnagRead,
    status_code=status.HTTP_201_CREATED,
    summary="Report Snag",
    description="Report a snag on a project or, without a project, on a named site.",
)
async def create_snag(
    payload: SnagCreate,
    user: CurrentUser,
    rbac: RBACDep,
    session: SessionDep,
    notifications: NotificationServiceDep,
) -> SnagRead:
    """
    Report a snag.

    - **project_id**: optional; omit for a site-level snag and give **site_name**.
    - **assigned_to_user_id**: when set the snag starts as assigned and the assignee is notified.
    """
    project = None
    if payload.project_id:
        project = await require_project_access(session, user, payload.project_id)
    await rbac.verify_permission(user, PermissionNode.snags_create, payload.project_id)

    snag = Snag(
        **payload.model_dump(),
        status=SnagStatus.assigned.value if payload.assigned_to_user_id else SnagStatus.open.value,
        created_by=user.id,
    )
    SnagHistoryRepository(session).record(snag, "create", None, user.id)
    snag = await SnagRepository(session).create(snag)
    logger.info(f"Snag created: {snag.id} ({snag.status}) by {user.id}")

    if snag.assigned_to_user_id:
        await notifications.notify_snag_assigned(
            snag.assigned_to_user_id, snag.description, _context_name(snag, project), snag.id
        )
    return SnagRead.model_validate(snag)


@router.patch(
    "/{snag_id}",
    response_model=SnagRead,
    summary="Update Snag",
    description="Update snag fields and/or apply a workflow action (assign, resolve, verify, close, reopen).",
    responses={
        400: {"description": "Unknown action or missing assignee"},
        403: {"description": "Permission denied"},
        404: {"description": "Snag not found"},
    },
)
async def update_snag(
    snag_id: str,
    payload: SnagUpdate,
    user: CurrentUser,
    rbac: RBACDep,
    session: SessionDep,
    notifications: NotificationServiceDep,
) -> SnagRead:
    snag, project = await _load_snag(session, user, snag_id)
    changes = payload.model_dump(exclude_unset=True)

    action: Optional[SnagAction] = None
    if payload.action:
        try:
            action = SnagAction(payload.action)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid action: {payload.action}") from e

    for key in FIELD_UPDATES:
        if key in changes:
            setattr(snag, key, changes[key])

    previous_status = snag.status
    previous_assignee = snag.assigned_to_user_id
    now = utc_now()

    if action == SnagAction.assign:
        if not payload.assigned_to_user_id:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="assigned_to_user_id is required")
        snag.assigned_to_user_id = payload.assigned_to_user_id
        snag.status = SnagStatus.assigned.value
    elif action == SnagAction.resolve:
        if not await rbac.has_any_permission(
            user, [PermissionNode.snags_resolve, PermissionNode.snags_verify], snag.project_id
        ):
            raise PermissionDeniedError("Permission denied: snags.resolve is required")
        snag.status = SnagStatus.resolved.value
        snag.resolved_at = now
        if payload.resolved_photos is not None:
            snag.resolved_photos = payload.resolved_photos
        if payload.resolved_description is not None:
            snag.resolved_description = payload.resolved_description
    elif action in (SnagAction.verify, SnagAction.close):
        await rbac.verify_permission(user, PermissionNode.snags_verify, snag.project_id)
        if action == SnagAction.verify:
            snag.status = SnagStatus.verified.value
        else:
            snag.status = SnagStatus.closed.value
            snag.closed_at = now
    elif action == SnagAction.reopen:
        snag.status = SnagStatus.open.value
        snag.resolved_at = None
        snag.closed_at = None
    elif "assigned_to_user_id" in changes:
        snag.assigned_to_user_id = payload.assigned_to_user_id

    if action is not None:
        SnagHistoryRepository(session).record(snag, action.value, previous_status, user.id, payload.note)
    snag.updated_at = now
    snag = await SnagRepository(session).update(snag)
    if action is not None:
        logger.info(f"Snag {snag.id}: {action.value} ({previous_status} -> {snag.status}) by {user.id}")

    context = _context_name(snag, project)
    if action == SnagAction.assign and snag.assigned_to_user_id != user.id:
        await notifications.notify_snag_assigned(snag.assigned_to_user_id, snag.description, context, snag.id)
    elif action == SnagAction.resolve and project is not None and project.created_by:
        await notifications.notify_snag_resolved(project.created_by, snag.description, context, snag.id)
    elif action in (SnagAction.verify, SnagAction.close) and previous_assignee:
        await notifications.notify_snag_verified(previous_assignee, snag.description, context, snag.id)
    return SnagRead.model_validate(snag)


@router.get(
    "/{snag_id}/history",
    response_model=List[SnagHistoryRead],
    summary="Snag History",
    description="Status changes of a snag, oldest first.",
)
async def snag_history(snag_id: str, user: CurrentUser, session: SessionDep) -> List[SnagHistoryRead]:
    snag, _ = await _load_snag(session, user, snag_id)
    entries = await SnagHistoryRepository(session).list_for_snag(snag.id)
    return [SnagHistoryRead.model_validate(entry) for entry in entries]
