"""
Snag I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import SnagPriority
from .base import PartialUpdate


class SnagCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    project_id: Optional[str] = Field(default=None, description="Omit for a site-level snag")
    site_name: Optional[str] = Field(default=None, max_length=255)
    client_name: Optional[str] = Field(default=None, max_length=255)
    customer_phone: Optional[str] = Field(default=None, max_length=32)
    description: str = Field(min_length=1)
    location: Optional[str] = Field(default=None, max_length=255)
    category: Optional[str] = Field(default=None, max_length=64)
    priority: SnagPriority = Field(default=SnagPriority.medium)
    assigned_to_user_id: Optional[str] = None
    photos: List[str] = Field(default_factory=list)


class SnagUpdate(PartialUpdate):
    """Partial update; ``action`` drives a workflow transition."""

    non_nullable = ("description", "priority", "photos", "resolved_photos")

    action: Optional[str] = Field(default=None, description="assign, resolve, verify, close or reopen")
    description: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[SnagPriority] = None
    photos: Optional[List[str]] = None
    assigned_to_user_id: Optional[str] = None
    resolved_photos: Optional[List[str]] = None
    resolved_description: Optional[str] = None
    note: Optional[str] = Field(default=None, description="Recorded in the snag history")


class SnagRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: Optional[str] = None
    site_name: Optional[str] = None
    client_name: Optional[str] = None
    customer_phone: Optional[str] = None
    description: str
    location: Optional[str] = None
    category: Optional[str] = None
    priority: str
    photos: List[str] = Field(default_factory=list)
    status: str
    assigned_to_user_id: Optional[str] = None
    resolved_photos: List[str] = Field(default_factory=list)
    resolved_description: Optional[str] = None
    resolved_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SnagHistoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    snag_id: str
    action: str
    from_status: Optional[str] = None
    to_status: str
    actor_id: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime
