"""
Design file entity models.

Design files are versioned by ``file_name`` within a project. At most one
design per project is flagged ``is_current_approved``; frozen designs cannot
be re-reviewed or deleted.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class DesignFile(Base, table=True):
    """Table: design_files"""

    __tablename__ = "design_files"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    project_id: str = Field(foreign_key="projects.id", max_length=36, index=True)
    file_name: str = Field(max_length=255, index=True)
    file_url: str = Field(sa_type=Text)
    file_type: Optional[str] = Field(default=None, max_length=64)
    version_number: int = Field(default=1, ge=1)
    parent_design_id: Optional[str] = Field(default=None, max_length=36)
    uploaded_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36)

    # Review
    approval_status: str = Field(default="pending", max_length=32, index=True)
    admin_comments: Optional[str] = Field(default=None, sa_type=Text)
    approved_by: Optional[str] = Field(default=None, max_length=36)
    approved_at: Optional[datetime] = Field(default=None)
    is_current_approved: bool = Field(default=False)

    # Freeze
    is_frozen: bool = Field(default=False)
    frozen_at: Optional[datetime] = Field(default=None)
    frozen_by: Optional[str] = Field(default=None, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, index=True)


class DesignComment(Base, table=True):
    """Table: design_comments"""

    __tablename__ = "design_comments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    design_file_id: str = Field(foreign_key="design_files.id", max_length=36, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=36)
    comment: str = Field(sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now)
