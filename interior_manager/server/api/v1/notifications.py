"""
Notification endpoints.

Callers only ever see and modify their own notifications. Administrators
can send a notification (in-app plus push) to any user.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Query, status

from interior_manager.core.database.repositories.notifications import NotificationRepository
from interior_manager.core.database.repositories.users import UserRepository
from interior_manager.core.errors import NotFoundError
from interior_manager.core.models.io.notifications import (
    NotificationCreate,
    NotificationMarkRequest,
    NotificationMarkResponse,
    NotificationRead,
    UnreadCount,
)
from interior_manager.server.services.deps import AdminUser, CurrentUser, NotificationServiceDep, SessionDep

router = APIRouter(tags=["notifications"])


@router.get(
    "",
    response_model=List[NotificationRead],
    summary="List Notifications",
    description="The caller's notifications, newest first.",
)
async def list_notifications(
    user: CurrentUser,
    session: SessionDep,
    unread_only: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=200),
) -> List[NotificationRead]:
    notifications = await NotificationRepository(session).list_for_user(user.id, unread_only=unread_only, limit=limit)
    return [NotificationRead.model_validate(n) for n in notifications]


@router.get(
    "/unread-count",
    response_model=UnreadCount,
    summary="Unread Count",
    description="Number of unread notifications, for polling clients.",
)
async def unread_count(user: CurrentUser, session: SessionDep) -> UnreadCount:
    return UnreadCount(count=await NotificationRepository(session).unread_count(user.id))


@router.post(
    "",
    response_model=NotificationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send Notification",
    description="Create an in-app notification for a user and push it to their devices.",
    responses={404: {"description": "User not found"}},
)
async def send_notification(
    payload: NotificationCreate, _: AdminUser, session: SessionDep, notifications: NotificationServiceDep
) -> NotificationRead:
    """
    Send a notification.

    - **user_id**: recipient.
    - **type**: one of the notification types; it decides the deep link.
    - **related_id** / **related_type**: the record the notification points at.
    """
    if await UserRepository(session).get_by_id(payload.user_id) is None:
        raise NotFoundError("User not found")
    result = await notifications.create_notification(
        payload.user_id,
        payload.title,
        payload.message,
        payload.type,
        payload.related_id,
        payload.related_type,
    )
    if not result.success or result.notification is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create notification")
    return NotificationRead.model_validate(result.notification)


@router.patch(
    "",
    response_model=NotificationMarkResponse,
    summary="Mark Notifications",
    description="Mark one, several, or all of the caller's notifications read or unread.",
)
async def mark_notifications(
    payload: NotificationMarkRequest, user: CurrentUser, session: SessionDep
) -> NotificationMarkResponse:
    ids = None
    if payload.notification_ids is not None:
        ids = list(payload.notification_ids)
    if payload.notification_id:
        ids = (ids or []) + [payload.notification_id]
    updated = await NotificationRepository(session).set_read(user.id, payload.is_read, ids)
    return NotificationMarkResponse(updated=updated)


@router.delete(
    "/{notification_id}",
    summary="Delete Notification",
    responses={404: {"description": "Notification not found"}},
)
async def delete_notification(notification_id: str, user: CurrentUser, session: SessionDep):
    if not await NotificationRepository(session).delete_for_user(user.id, notification_id):
        raise NotFoundError("Notification not found")
    return {"success": True}
