"""
Project entity models.

A project is the root aggregate: BOQ items, design files, steps and tasks,
snags, invoices and payments all hang off ``projects.id``. Membership rows
grant project-scoped permission codes to non-admin users.
"""

from datetime import date, datetime
from typing import List, Optional

from sqlmodel import JSON, Field, Text, UniqueConstraint

from ..base import Base, new_id, utc_now


class Project(Base, table=True):
    """Entity for interior projects.

    Table: projects
    """

    __tablename__ = "projects"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    title: str = Field(max_length=255, index=True)
    description: Optional[str] = Field(default=None, sa_type=Text)

    # Customer and site
    customer_name: Optional[str] = Field(default=None, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=32)
    address: Optional[str] = Field(default=None, sa_type=Text)
    property_type: Optional[str] = Field(default=None, max_length=64)
    area_sqft: Optional[float] = Field(default=None, ge=0)

    # Lifecycle
    status: str = Field(default="pending", max_length=32, index=True)
    workflow_stage: Optional[str] = Field(default=None, max_length=32)
    project_budget: Optional[float] = Field(default=None, ge=0)
    project_notes: Optional[str] = Field(default=None, sa_type=Text)
    start_date: Optional[date] = Field(default=None)
    estimated_completion_date: Optional[date] = Field(default=None)
    actual_completion_date: Optional[date] = Field(default=None)

    assigned_employee_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36, index=True)
    created_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36, index=True)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Project(id={self.id}, title={self.title}, status={self.status})"


class ProjectMember(Base, table=True):
    """Entity granting a user access to a project.

    ``permissions`` is a JSON list of permission codes; ``"*"`` grants all.

    Table: project_members
    """

    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_member"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    project_id: str = Field(foreign_key="projects.id", max_length=36, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    permissions: List[str] = Field(default_factory=list, sa_type=JSON)
    created_at: datetime = Field(default_factory=utc_now)
