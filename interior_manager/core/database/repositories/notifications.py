"""
Notification repository.

All queries are scoped by ``user_id`` so a caller can only read or modify
their own notifications.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, func, update
from sqlmodel import select

from ..entities.notifications import Notification
from .base import SQLModelRepository


class NotificationRepository(SQLModelRepository[Notification]):
    """Repository for in-app notifications."""

    def __init__(self, session) -> None:
        super().__init__(session, Notification)

    async def list_for_user(self, user_id: str, *, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read == False)  # noqa: E712
        stmt = stmt.order_by(Notification.created_at.desc()).limit(limit)  # type: ignore[attr-defined]
        return await self._all(stmt)

    async def unread_count(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Notification).where(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
            )
        )
        return int(result.scalar_one())

    async def set_read(self, user_id: str, is_read: bool, notification_ids: Optional[List[str]] = None) -> int:
        """Mark the given notifications (or all of the user's) read or unread.

        Returns:
            Number of rows updated
        """
        stmt = update(Notification).where(Notification.user_id == user_id)
        if notification_ids is not None:
            stmt = stmt.where(Notification.id.in_(notification_ids))  # type: ignore[attr-defined]
        result = await self._execute_bulk(stmt.values(is_read=is_read))
        await self.session.commit()
        return result.rowcount or 0

    async def delete_for_user(self, user_id: str, notification_id: str) -> bool:
        result = await self._execute_bulk(
            delete(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
        )
        await self.session.commit()
        return bool(result.rowcount)
