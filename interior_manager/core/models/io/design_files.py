"""
Design file I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import ApprovalStatus, DesignBulkAction


class DesignFileCreate(BaseModel):
    project_id: str
    file_name: str = Field(min_length=1, max_length=255)
    file_url: str = Field(min_length=1)
    file_type: Optional[str] = Field(default=None, max_length=64)
    version_number: Optional[int] = Field(
        default=None, ge=1, description="Next version of the same file name when omitted"
    )


class DesignApprovalUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    approval_status: ApprovalStatus
    admin_comments: Optional[str] = None


class DesignCommentCreate(BaseModel):
    comment: str = Field(min_length=1)


class DesignCommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    design_file_id: str
    user_id: str
    comment: str
    created_at: datetime


class DesignFileRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    file_name: str
    file_url: str
    file_type: Optional[str] = None
    version_number: int
    parent_design_id: Optional[str] = None
    uploaded_by: Optional[str] = None
    approval_status: str
    admin_comments: Optional[str] = None
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    is_current_approved: bool
    is_frozen: bool
    frozen_at: Optional[datetime] = None
    frozen_by: Optional[str] = None
    created_at: datetime
    comments: List[DesignCommentRead] = Field(default_factory=list)


class DesignVersionsResponse(BaseModel):
    current_id: str
    file_name: str
    versions: List[DesignFileRead]
    total_versions: int


class DesignRef(BaseModel):
    id: str
    file_name: str


class DesignFreezeResponse(BaseModel):
    message: str
    design: DesignRef


class DesignBulkApproval(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    design_ids: List[str] = Field(min_length=1)
    action: DesignBulkAction
    admin_comments: Optional[str] = None


class DesignBulkApprovalResult(BaseModel):
    message: str
    updated_count: int
    design_ids: List[str]
