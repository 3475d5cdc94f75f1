"""
Project and project membership I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import ProjectStatus, WorkflowStage
from .base import PartialUpdate


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    title: str = Field(min_length=2, max_length=255)
    description: Optional[str] = None
    customer_name: Optional[str] = Field(default=None, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=32)
    address: Optional[str] = None
    property_type: Optional[str] = Field(default=None, max_length=64)
    area_sqft: Optional[float] = Field(default=None, ge=0)
    status: ProjectStatus = Field(default=ProjectStatus.pending)
    workflow_stage: Optional[WorkflowStage] = None
    project_budget: Optional[float] = Field(default=None, ge=0)
    project_notes: Optional[str] = None
    start_date: Optional[date] = None
    estimated_completion_date: Optional[date] = None
    assigned_employee_id: Optional[str] = None


class ProjectUpdate(PartialUpdate):
    """Schema for partially updating a project."""

    non_nullable = ("title", "status")

    title: Optional[str] = Field(default=None, min_length=2, max_length=255)
    description: Optional[str] = None
    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    property_type: Optional[str] = None
    area_sqft: Optional[float] = Field(default=None, ge=0)
    status: Optional[ProjectStatus] = None
    workflow_stage: Optional[WorkflowStage] = None
    project_budget: Optional[float] = Field(default=None, ge=0)
    project_notes: Optional[str] = None
    start_date: Optional[date] = None
    estimated_completion_date: Optional[date] = None
    actual_completion_date: Optional[date] = None
    assigned_employee_id: Optional[str] = None


class ProjectRead(BaseModel):
    """Schema for reading a project. ``project_budget`` is null unless the caller may see it."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    customer_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    property_type: Optional[str] = None
    area_sqft: Optional[float] = None
    status: str
    workflow_stage: Optional[str] = None
    project_budget: Optional[float] = None
    project_notes: Optional[str] = None
    start_date: Optional[date] = None
    estimated_completion_date: Optional[date] = None
    actual_completion_date: Optional[date] = None
    assigned_employee_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProjectMemberUpsert(BaseModel):
    user_id: str
    permissions: List[str] = Field(
        default_factory=list, description="Permission codes granted on this project; '*' grants all"
    )


class ProjectMemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    user_id: str
    permissions: List[str]
    full_name: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime
