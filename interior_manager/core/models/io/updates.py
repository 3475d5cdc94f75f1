"""
Project progress update I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .auth import UserRef
from .base import PartialUpdate


class ProgressUpdateCreate(BaseModel):
    project_id: str
    update_date: date
    description: str = Field(min_length=1)
    photos: List[str] = Field(default_factory=list)
    audio_url: Optional[str] = None


class ProgressUpdateEdit(PartialUpdate):
    non_nullable = ("update_date", "description", "photos")

    update_date: Optional[date] = None
    description: Optional[str] = Field(default=None, min_length=1)
    photos: Optional[List[str]] = None
    audio_url: Optional[str] = None


class ProgressUpdateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    user_id: str
    update_date: date
    description: str
    photos: List[str] = Field(default_factory=list)
    audio_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user: Optional[UserRef] = None


class ProgressUpdateList(BaseModel):
    updates: List[ProgressUpdateRead]


class ProgressUpdateResponse(BaseModel):
    update: ProgressUpdateRead
