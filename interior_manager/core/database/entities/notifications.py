"""
Notification entity model.

In-app notifications shown in the bell menu; push delivery is handled
separately and not persisted.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class Notification(Base, table=True):
    """Table: notifications"""

    __tablename__ = "notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    title: str = Field(max_length=255)
    message: str = Field(sa_type=Text)
    type: str = Field(default="general", max_length=32)
    related_id: Optional[str] = Field(default=None, max_length=36)
    related_type: Optional[str] = Field(default=None, max_length=32)
    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
