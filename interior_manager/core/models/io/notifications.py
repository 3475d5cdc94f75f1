"""
Notification I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import NotificationType


class NotificationCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    user_id: str
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    type: NotificationType
    related_id: Optional[str] = None
    related_type: Optional[str] = None


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    message: str
    type: str
    related_id: Optional[str] = None
    related_type: Optional[str] = None
    is_read: bool
    created_at: datetime


class NotificationMarkRequest(BaseModel):
    """Mark one, several, or (when no ids are given) all of the caller's notifications."""

    is_read: bool
    notification_id: Optional[str] = None
    notification_ids: Optional[List[str]] = None


class NotificationMarkResponse(BaseModel):
    success: bool = True
    updated: int


class UnreadCount(BaseModel):
    count: int
