"""
Notification service.

Creates in-app notifications and fans them out as push notifications.
Each notification type maps to a deep link into the web app so that tapping
a push opens the relevant screen.
Inside a request the push leg runs as a FastAPI background task.

Notification delivery is a side effect of other operations (a task being
assigned, a payment being recorded...). ``create_notification`` therefore
never raises: failures are logged and reported in the returned result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import AsyncSession

from interior_manager.core.database.entities.notifications import Notification
from interior_manager.core.database.repositories.notifications import NotificationRepository
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import NotificationType
from interior_manager.core.monitoring import log_notification_sent
from interior_manager.server.core.config import settings
from interior_manager.server.services.push import OneSignalClient

logger = get_logger(__name__)

DASHBOARD = "/dashboard"

SNAG_TYPES = {
    NotificationType.snag_created,
    NotificationType.snag_assigned,
    NotificationType.snag_resolved,
    NotificationType.snag_verified,
}
DESIGN_TYPES = {
    NotificationType.design_approved,
    NotificationType.design_rejected,
    NotificationType.design_uploaded,
}
FINANCE_TYPES = {
    NotificationType.invoice_created,
    NotificationType.invoice_approved,
    NotificationType.invoice_rejected,
    NotificationType.payment_recorded,
}


def format_amount(amount: float) -> str:
    """Render a rupee amount without a trailing ``.0`` for whole numbers."""
    return f"{amount:,.0f}" if float(amount).is_integer() else f"{amount:,.2f}"


def notification_url(
    notification_type: Union[NotificationType, str],
    related_id: Optional[str] = None,
    related_type: Optional[str] = None,
) -> Optional[str]:
    """
    Deep link (relative to the app root) for a notification.

    Returns:
        A ``/dashboard/...`` route, or None when the type has no target screen
    """
    try:
        kind = NotificationType(notification_type)
    except ValueError:
        return None

    if kind == NotificationType.task_assigned:
        return f"{DASHBOARD}/tasks?taskId={related_id}" if related_id else f"{DASHBOARD}/tasks"
    if kind in SNAG_TYPES:
        if related_type == "project" and related_id:
            return f"{DASHBOARD}/projects/{related_id}?stage=snag"
        return f"{DASHBOARD}/snags?snagId={related_id}" if related_id else f"{DASHBOARD}/snags"
    if kind in DESIGN_TYPES or kind == NotificationType.comment_added:
        return f"{DASHBOARD}/projects/{related_id}?stage=design" if related_id else None
    if kind in (NotificationType.project_update, NotificationType.mention):
        return f"{DASHBOARD}/projects/{related_id}?stage=work_progress&tab=updates" if related_id else None
    if kind in FINANCE_TYPES:
        return f"{DASHBOARD}/projects/{related_id}?stage=orders" if related_id else f"{DASHBOARD}/tasks?category=proposals"
    return None


@dataclass
class NotificationResult:
    success: bool
    notification: Optional[Notification] = None
    pushed: bool = False
    queued: bool = False
    error: Optional[str] = None


class NotificationService:
    """In-app and push notification delivery."""

    def __init__(
        self,
        session: AsyncSession,
        push_client: OneSignalClient,
        app_url: Optional[str] = None,
        background_tasks: Optional[BackgroundTasks] = None,
    ):
        self.session = session
        self.push_client = push_client
        self.background_tasks = background_tasks
        self.app_url = (app_url if app_url is not None else settings.app_url).rstrip("/")
        self.repository = NotificationRepository(session)

    async def create_notification(
        self,
        user_id: str,
        title: str,
        message: str,
        notification_type: Union[NotificationType, str],
        related_id: Optional[str] = None,
        related_type: Optional[str] = None,
        *,
        skip_in_app: bool = False,
    ) -> NotificationResult:
        """
        Store an in-app notification and send the matching push.

        With ``background_tasks`` set, the push is queued to run after the
        response has been sent and ``queued`` is set instead of ``pushed``.

        Args:
            user_id: Recipient
            title: Short heading
            message: Body text
            notification_type: NotificationType value
            related_id: ID of the record the notification is about
            related_type: Kind of that record (project, project_step, snag, ...)
            skip_in_app: Only send the push

        Returns:
            NotificationResult; ``success`` is False if the in-app row could not be stored
        """
        type_value = NotificationType(notification_type).value
        result = NotificationResult(success=True)

        if not skip_in_app:
            try:
                result.notification = await self.repository.create(
                    Notification(
                        user_id=user_id,
                        title=title,
                        message=message,
                        type=type_value,
                        related_id=related_id,
                        related_type=related_type,
                    )
                )
            except Exception as e:
                await self.session.rollback()
                logger.error(f"Failed to store notification for user {user_id}: {e}", exc_info=True)
                return NotificationResult(success=False, error=str(e))

        if self.background_tasks is not None:
            self.background_tasks.add_task(self._push, user_id, title, message, type_value, related_id, related_type)
            result.queued = True
        else:
            result.pushed = await self._push(user_id, title, message, type_value, related_id, related_type)
        return result

    async def _push(
        self,
        user_id: str,
        title: str,
        message: str,
        type_value: str,
        related_id: Optional[str],
        related_type: Optional[str],
    ) -> bool:
        route = notification_url(type_value, related_id, related_type)
        pushed = False
        try:
            pushed = await self.push_client.send(
                external_user_ids=[user_id],
                title=title,
                message=message,
                data={
                    "type": type_value,
                    "relatedId": related_id,
                    "relatedType": related_type,
                    "route": route,
                },
                url=f"{self.app_url}{route}" if route else None,
            )
        except Exception as e:
            logger.error(f"Push notification to user {user_id} failed: {e}", exc_info=True)

        log_notification_sent(type_value, user_id, pushed)
        return pushed

    async def notify_users(
        self,
        user_ids: Iterable[Optional[str]],
        title: str,
        message: str,
        notification_type: Union[NotificationType, str],
        related_id: Optional[str] = None,
        related_type: Optional[str] = None,
        *,
        exclude: Optional[str] = None,
    ) -> list[NotificationResult]:
        """Notify several users once each, skipping empty IDs and ``exclude`` (usually the actor)."""
        results = []
        seen = set()
        for user_id in user_ids:
            if not user_id or user_id == exclude or user_id in seen:
                continue
            seen.add(user_id)
            results.append(
                await self.create_notification(user_id, title, message, notification_type, related_id, related_type)
            )
        return results

    # Typed helpers

    async def notify_task_assigned(
        self, user_id: str, task_title: str, project_name: str, task_id: Optional[str] = None
    ) -> NotificationResult:
        return await self.create_notification(
            user_id,
            "New Task Assigned",
            f'You have been assigned to "{task_title}" in project "{project_name}"',
            NotificationType.task_assigned,
            task_id,
            "task",
        )

    async def notify_project_update(
        self, user_id: str, project_name: str, update_message: str, project_id: Optional[str] = None
    ) -> NotificationResult:
        return await self.create_notification(
            user_id,
            f"Project Update: {project_name}",
            update_message,
            NotificationType.project_update,
            project_id,
            "project",
        )

    async def notify_design_approved(self, user_id: str, design_name: str, project_id: str) -> NotificationResult:
        return await self.create_notification(
            user_id,
            "Design Approved",
            f'Your design "{design_name}" has been approved',
            NotificationType.design_approved,
            project_id,
            "project",
        )

    async def notify_design_rejected(
        self, user_id: str, design_name: str, project_id: str, comments: Optional[str] = None
    ) -> NotificationResult:
        message = f'Your design "{design_name}" needs changes'
        if comments:
            message = f"{message}: {comments}"
        return await self.create_notification(
            user_id,
            "Design Needs Changes",
            message,
            NotificationType.design_rejected,
            project_id,
            "project",
        )

    async def notify_snag_assigned(
        self, user_id: str, description: str, project_name: str, snag_id: Optional[str] = None
    ) -> NotificationResult:
        return await self.create_notification(
            user_id,
            "Snag Assigned",
            f'You have been assigned a snag in project "{project_name}": {description}',
            NotificationType.snag_assigned,
            snag_id,
            "snag",
        )

    async def notify_snag_resolved(
        self, user_id: str, description: str, project_name: str, snag_id: Optional[str] = None
    ) -> NotificationResult:
        return await self.create_notification(
            user_id,
            "Snag Resolved",
            f'A snag has been resolved in project "{project_name}": {description}',
            NotificationType.snag_resolved,
            snag_id,
            "snag",
        )

    async def notify_snag_verified(
        self, user_id: str, description: str, project_name: str, snag_id: Optional[str] = None
    ) -> NotificationResult:
        return await self.create_notification(
            user_id,
            "Snag Verified",
            f'A snag has been verified and closed in project "{project_name}": {description}',
            NotificationType.snag_verified,
            snag_id,
            "snag",
        )

    async def notify_invoice_created(
        self, user_id: str, invoice_number: str, project_name: str, amount: float, project_id: str
    ) -> NotificationResult:
        return await self.create_notification(
            user_id,
            "New Invoice Created",
            f'A new invoice ({invoice_number}) for ₹{format_amount(amount)} was created for project "{project_name}"',
            NotificationType.invoice_created,
            project_id,
            "project",
        )

    async def notify_payment_recorded(
        self, user_id: str, project_name: str, amount: float, project_id: str
    ) -> NotificationResult:
        return await self.create_notification(
            user_id,
            "Payment Recorded",
            f'A payment of ₹{format_amount(amount)} has been recorded for project "{project_name}"',
            NotificationType.payment_recorded,
            project_id,
            "project",
        )

    async def notify_comment_added(
        self, user_id: str, commenter_name: str, design_name: str, project_id: str
    ) -> NotificationResult:
        return await self.create_notification(
            user_id,
            "New Comment",
            f'{commenter_name} commented on design "{design_name}"',
            NotificationType.comment_added,
            project_id,
            "project",
        )
