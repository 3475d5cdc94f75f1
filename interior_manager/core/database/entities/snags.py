"""
Snag entity models.

A snag is a defect reported on site. It moves through
open -> assigned -> resolved -> verified -> closed and may be reopened.
Every transition is recorded in ``snag_history``.
"""

from datetime import datetime
from typing import List, Optional

from sqlmodel import JSON, Field, Text

from ..base import Base, new_id, utc_now


class Snag(Base, table=True):
    """Table: snags"""

    __tablename__ = "snags"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    project_id: Optional[str] = Field(default=None, foreign_key="projects.id", max_length=36, index=True)

    # Site-level context when the snag is not tied to a project
    site_name: Optional[str] = Field(default=None, max_length=255)
    client_name: Optional[str] = Field(default=None, max_length=255)
    customer_phone: Optional[str] = Field(default=None, max_length=32)

    description: str = Field(sa_type=Text)
    location: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = Field(default=None, max_length=64)
    priority: str = Field(default="medium", max_length=16)
    photos: List[str] = Field(default_factory=list, sa_type=JSON)

    status: str = Field(default="open", max_length=16, index=True)
    assigned_to_user_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36, index=True)

    resolved_photos: List[str] = Field(default_factory=list, sa_type=JSON)
    resolved_description: Optional[str] = Field(default=None, sa_type=Text)
    resolved_at: Optional[datetime] = Field(default=None)
    closed_at: Optional[datetime] = Field(default=None)

    created_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class SnagHistory(Base, table=True):
    """Audit row for a snag status change.

    Table: snag_history
    """

    __tablename__ = "snag_history"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    snag_id: str = Field(foreign_key="snags.id", max_length=36, index=True)
    action: str = Field(max_length=16)
    from_status: Optional[str] = Field(default=None, max_length=16)
    to_status: str = Field(max_length=16)
    actor_id: Optional[str] = Field(default=None, max_length=36)
    note: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now)
