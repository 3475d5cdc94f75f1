"""
Design file endpoints.

Designs are versioned by file name within a project. An administrator
approves or rejects each version; at most one design per project is the
"current approved" one. A frozen design can no longer change its approval
or be deleted.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from interior_manager.core.database.base import utc_now
from interior_manager.core.database.entities.design_files import DesignComment, DesignFile
from interior_manager.core.database.entities.users import User
from interior_manager.core.database.repositories.design_files import DesignCommentRepository, DesignFileRepository
from interior_manager.core.errors import ConflictError, NotFoundError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import (
    ApprovalStatus,
    DesignBulkAction,
    NotificationType,
    PermissionNode,
    UserRole,
)
from interior_manager.core.models.io.design_files import (
    DesignApprovalUpdate,
    DesignBulkApproval,
    DesignBulkApprovalResult,
    DesignCommentCreate,
    DesignCommentRead,
    DesignFileCreate,
    DesignFileRead,
    DesignFreezeResponse,
    DesignRef,
    DesignVersionsResponse,
)
from interior_manager.server.services.access import require_project_access
from interior_manager.server.services.deps import (
    AdminUser,
    CurrentUser,
    NotificationServiceDep,
    RBACDep,
    SessionDep,
)

logger = get_logger(__name__)

router = APIRouter(tags=["design-files"])

FREEZE_ROLES = {UserRole.admin.value, UserRole.project_manager.value}


async def _load_design(session, user: User, design_id: str) -> DesignFile:
    design = await DesignFileRepository(session).get_by_id(design_id)
    if design is None:
        raise NotFoundError("Design file not found")
    await require_project_access(session, user, design.project_id)
    return design


def _require_freezer(user: User) -> None:
    if user.role not in FREEZE_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins and project managers can freeze designs",
        )


@router.get(
    "",
    response_model=List[DesignFileRead],
    summary="List Design Files",
    description="List a project's designs, newest first, each with its comments.",
)
async def list_design_files(
    user: CurrentUser, session: SessionDep, project_id: str = Query(description="Project to list designs for")
) -> List[DesignFileRead]:
    await require_project_access(session, user, project_id)
    designs = await DesignFileRepository(session).list_for_project(project_id)
    comments = await DesignCommentRepository(session).list_for_designs([d.id for d in designs])

    result = []
    for design in designs:
        data = DesignFileRead.model_validate(design)
        data.comments = [DesignCommentRead.model_validate(c) for c in comments.get(design.id, [])]
        result.append(data)
    return result


@router.post(
    "",
    response_model=DesignFileRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Design File",
    description="Register a design file. Re-using a file name creates the next version of it.",
)
async def create_design_file(
    payload: DesignFileCreate,
    user: CurrentUser,
    rbac: RBACDep,
    session: SessionDep,
    notifications: NotificationServiceDep,
) -> DesignFileRead:
    """
    Upload a design.

    - **file_name**: versions are tracked per file name within the project.
    - **file_url**: where the file is stored.
    - **version_number**: optional; defaults to the next version.
    """
    project = await require_project_access(session, user, payload.project_id)
    await rbac.verify_permission(user, PermissionNode.designs_upload, project.id)

    repository = DesignFileRepository(session)
    data = payload.model_dump()
    parent_id = None
    if data.get("version_number") is None:
        latest = await repository.latest_version(project.id, payload.file_name)
        data["version_number"] = latest.version_number + 1 if latest else 1
        parent_id = latest.id if latest else None

    design = await repository.create(
        DesignFile(
            **data,
            parent_design_id=parent_id,
            uploaded_by=user.id,
            approval_status=ApprovalStatus.pending.value,
        )
    )
    logger.info(f"Design uploaded: {design.file_name} v{design.version_number} ({design.id}) by {user.id}")

    if project.created_by and project.created_by != user.id:
        await notifications.create_notification(
            project.created_by,
            "New Design Uploaded",
            f'{user.full_name} uploaded "{design.file_name}" (v{design.version_number}) to project "{project.title}"',
            NotificationType.design_uploaded,
            project.id,
            "project",
        )
    return DesignFileRead.model_validate(design)


@router.patch(
    "/{design_id}/approval",
    response_model=DesignFileRead,
    summary="Set Design Approval",
    description="Approve, reject or request changes on a design. The uploader is notified.",
    responses={404: {"description": "Design file not found"}, 409: {"description": "Design is frozen"}},
)
async def update_approval(
    design_id: str,
    payload: DesignApprovalUpdate,
    admin: AdminUser,
    session: SessionDep,
    notifications: NotificationServiceDep,
) -> DesignFileRead:
    repository = DesignFileRepository(session)
    design = await _load_design(session, admin, design_id)
    if design.is_frozen:
        raise ConflictError("Design is frozen and cannot be changed")

    approved = payload.approval_status == ApprovalStatus.approved.value
    if approved:
        await repository.clear_current_approved(design.project_id)
    design.approval_status = payload.approval_status
    design.admin_comments = payload.admin_comments
    design.approved_by = admin.id
    design.approved_at = utc_now()
    design.is_current_approved = approved
    design = await repository.update(design)
    logger.info(f"Design {design.id} set to {design.approval_status} by {admin.id}")

    if design.uploaded_by:
        if approved:
            await notifications.notify_design_approved(design.uploaded_by, design.file_name, design.project_id)
        elif payload.approval_status in (ApprovalStatus.rejected.value, ApprovalStatus.needs_changes.value):
            await notifications.notify_design_rejected(
                design.uploaded_by, design.file_name, design.project_id, payload.admin_comments
            )
    return DesignFileRead.model_validate(design)


@router.post(
    "/bulk-approve",
    response_model=DesignBulkApprovalResult,
    summary="Bulk Approve Designs",
    description=(
        "Approve or reject many designs at once. Unknown and frozen designs are skipped; each uploader is notified."
    ),
)
async def bulk_approve(
    payload: DesignBulkApproval,
    admin: AdminUser,
    session: SessionDep,
    notifications: NotificationServiceDep,
) -> DesignBulkApprovalResult:
    repository = DesignFileRepository(session)
    approve = payload.action == DesignBulkAction.approve.value
    designs = [design for design in await repository.get_many(payload.design_ids) if not design.is_frozen]

    approved_at = utc_now()
    for design in designs:
        if approve:
            # The last design approved in a project ends up as its current one
            await repository.clear_current_approved(design.project_id)
        design.approval_status = ApprovalStatus.approved.value if approve else ApprovalStatus.rejected.value
        design.approved_by = admin.id
        design.approved_at = approved_at
        design.is_current_approved = approve
        if payload.admin_comments:
            design.admin_comments = payload.admin_comments
    updated = await repository.update_many(designs)
    verb = "approved" if approve else "rejected"
    logger.info(f"Bulk design review by {admin.id}: {updated}/{len(payload.design_ids)} {verb}")

    for design in designs:
        if not design.uploaded_by:
            continue
        if approve:
            await notifications.notify_design_approved(design.uploaded_by, design.file_name, design.project_id)
        else:
            await notifications.notify_design_rejected(
                design.uploaded_by, design.file_name, design.project_id, payload.admin_comments
            )

    return DesignBulkApprovalResult(
        message=f"Successfully {verb} {updated} design(s)",
        updated_count=updated,
        design_ids=[design.id for design in designs],
    )


@router.delete(
    "/{design_id}",
    summary="Delete Design File",
    responses={404: {"description": "Design file not found"}, 409: {"description": "Design is frozen"}},
)
async def delete_design_file(design_id: str, user: CurrentUser, rbac: RBACDep, session: SessionDep):
    design = await _load_design(session, user, design_id)
    await rbac.verify_permission(user, PermissionNode.designs_delete, design.project_id)
    if design.is_frozen:
        raise ConflictError("Design is frozen and cannot be deleted")
    await DesignFileRepository(session).delete_with_comments(design.id)
    logger.info(f"Design deleted: {design.id} by {user.id}")
    return {"success": True}


@router.post(
    "/{design_id}/freeze",
    response_model=DesignFreezeResponse,
    summary="Freeze Design",
    description="Lock a design against approval changes and deletion.",
)
async def freeze_design(design_id: str, user: CurrentUser, session: SessionDep) -> DesignFreezeResponse:
    _require_freezer(user)
    design = await _load_design(session, user, design_id)
    design.is_frozen = True
    design.frozen_at = utc_now()
    design.frozen_by = user.id
    design = await DesignFileRepository(session).update(design)
    logger.info(f"Design frozen: {design.id} by {user.id}")
    return DesignFreezeResponse(
        message="Design frozen successfully", design=DesignRef(id=design.id, file_name=design.file_name)
    )


@router.delete(
    "/{design_id}/freeze",
    response_model=DesignFreezeResponse,
    summary="Unfreeze Design",
)
async def unfreeze_design(design_id: str, user: CurrentUser, session: SessionDep) -> DesignFreezeResponse:
    _require_freezer(user)
    design = await _load_design(session, user, design_id)
    design.is_frozen = False
    design.frozen_at = None
    design.frozen_by = None
    design = await DesignFileRepository(session).update(design)
    logger.info(f"Design unfrozen: {design.id} by {user.id}")
    return DesignFreezeResponse(
        message="Design unfrozen successfully", design=DesignRef(id=design.id, file_name=design.file_name)
    )


@router.get(
    "/{design_id}/versions",
    response_model=DesignVersionsResponse,
    summary="Design Versions",
    description="Every version of the design's file name in its project, newest first.",
)
async def design_versions(design_id: str, user: CurrentUser, session: SessionDep) -> DesignVersionsResponse:
    design = await _load_design(session, user, design_id)
    versions = await DesignFileRepository(session).versions(design.project_id, design.file_name)
    return DesignVersionsResponse(
        current_id=design.id,
        file_name=design.file_name,
        versions=[DesignFileRead.model_validate(v) for v in versions],
        total_versions=len(versions),
    )


@router.post(
    "/{design_id}/comments",
    response_model=DesignCommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on Design",
    description="Add a comment. The uploader and the project creator are notified.",
)
async def add_comment(
    design_id: str,
    payload: DesignCommentCreate,
    user: CurrentUser,
    session: SessionDep,
    notifications: NotificationServiceDep,
) -> DesignCommentRead:
    design = await _load_design(session, user, design_id)
    project = await require_project_access(session, user, design.project_id)
    comment = await DesignCommentRepository(session).create(
        DesignComment(design_file_id=design.id, user_id=user.id, comment=payload.comment)
    )

    notified = set()
    for recipient in (design.uploaded_by, project.created_by):
        if not recipient or recipient == user.id or recipient in notified:
            continue
        notified.add(recipient)
        await notifications.notify_comment_added(recipient, user.full_name, design.file_name, design.project_id)
    return DesignCommentRead.model_validate(comment)
