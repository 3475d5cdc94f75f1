"""
Project step and task I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import StepStatus, TaskActivityType, TaskStatus, WorkflowStage
from .auth import UserRef
from .base import PartialUpdate


class ProjectStepCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    project_id: str
    title: str = Field(min_length=1, max_length=255)
    stage: WorkflowStage = Field(default=WorkflowStage.work_progress)
    sort_order: int = Field(default=0)
    status: StepStatus = Field(default=StepStatus.todo)


class ProjectStepUpdate(PartialUpdate):
    non_nullable = ("title", "stage", "sort_order", "status")

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    stage: Optional[WorkflowStage] = None
    sort_order: Optional[int] = None
    status: Optional[StepStatus] = None


class ProjectStepRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    title: str
    stage: str
    sort_order: int
    status: str
    created_at: datetime


class TaskCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    step_id: str
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    status: TaskStatus = Field(default=TaskStatus.todo)
    assigned_to: Optional[str] = None
    start_date: Optional[date] = None
    estimated_completion_date: Optional[date] = None


class TaskUpdate(PartialUpdate):
    non_nullable = ("title", "status", "completion_photos")

    title: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    assigned_to: Optional[str] = None
    start_date: Optional[date] = None
    estimated_completion_date: Optional[date] = None
    completion_description: Optional[str] = None
    completion_photos: Optional[List[str]] = None


class TaskRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    step_id: str
    title: str
    description: Optional[str] = None
    status: str
    assigned_to: Optional[str] = None
    start_date: Optional[date] = None
    estimated_completion_date: Optional[date] = None
    completion_description: Optional[str] = None
    completion_photos: List[str] = Field(default_factory=list)
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TaskBulkUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    task_ids: List[str] = Field(min_length=1)
    status: TaskStatus


class TaskBulkResult(BaseModel):
    success: bool = True
    updated: int


class TaskActivityCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    activity_type: TaskActivityType
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    comment: Optional[str] = None


class TaskActivityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    task_id: str
    user_id: str
    activity_type: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    comment: Optional[str] = None
    created_at: datetime
    user: Optional[UserRef] = None


class TaskActivityList(BaseModel):
    activities: List[TaskActivityRead]


class TaskActivityResponse(BaseModel):
    activity: TaskActivityRead
