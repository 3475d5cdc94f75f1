"""
Project step and task entity models.

Steps group work within a workflow stage; tasks are the assignable units
inside a step.
"""

from datetime import date, datetime
from typing import List, Optional

from sqlmodel import JSON, Field, Text

from ..base import Base, new_id, utc_now


class ProjectStep(Base, table=True):
    """Table: project_steps"""

    __tablename__ = "project_steps"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    project_id: str = Field(foreign_key="projects.id", max_length=36, index=True)
    title: str = Field(max_length=255)
    stage: str = Field(default="work_progress", max_length=32, index=True)
    sort_order: int = Field(default=0)
    status: str = Field(default="todo", max_length=32)
    created_at: datetime = Field(default_factory=utc_now)


class ProjectStepTask(Base, table=True):
    """Entity for a task within a project step.

    Table: project_step_tasks
    """

    __tablename__ = "project_step_tasks"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    step_id: str = Field(foreign_key="project_steps.id", max_length=36, index=True)
    title: str = Field(max_length=500)
    description: Optional[str] = Field(default=None, sa_type=Text)
    status: str = Field(default="todo", max_length=32, index=True)
    assigned_to: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36, index=True)
    start_date: Optional[date] = Field(default=None)
    estimated_completion_date: Optional[date] = Field(default=None)
    completion_description: Optional[str] = Field(default=None, sa_type=Text)
    completion_photos: List[str] = Field(default_factory=list, sa_type=JSON)
    created_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class TaskActivity(Base, table=True):
    """Immutable timeline entry for a task.

    ``old_value`` and ``new_value`` hold the before and after of a change;
    ``comment`` holds free text for ``commented`` entries.

    Table: task_activity
    """

    __tablename__ = "task_activity"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    task_id: str = Field(foreign_key="project_step_tasks.id", max_length=36, index=True)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    activity_type: str = Field(max_length=50)
    old_value: Optional[str] = Field(default=None, sa_type=Text)
    new_value: Optional[str] = Field(default=None, sa_type=Text)
    comment: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now, index=True)
