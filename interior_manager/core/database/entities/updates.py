"""
Project update entity.

Dated progress posts on a project's work-progress timeline, with optional
site photos and a voice note.
"""

from datetime import date, datetime
from typing import List, Optional

from sqlmodel import JSON, Field, Text

from ..base import Base, new_id, utc_now


class ProgressUpdate(Base, table=True):
    """Table: project_updates"""

    __tablename__ = "project_updates"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    project_id: str = Field(foreign_key="projects.id", max_length=36, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=36)
    update_date: date = Field(index=True)
    description: str = Field(sa_type=Text)
    photos: List[str] = Field(default_factory=list, sa_type=JSON)
    audio_url: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
