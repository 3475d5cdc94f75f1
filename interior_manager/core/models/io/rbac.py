"""
RBAC I/O models.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PermissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    module: str
    description: Optional[str] = None


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    description: Optional[str] = None


class RoleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    permissions: List[str] = Field(default_factory=list, description="Granted permission codes")


class RolePermissionsUpdate(BaseModel):
    codes: List[str] = Field(description="Full replacement set of permission codes (wildcards like 'boq.*' allowed)")


class UserPermissionsRead(BaseModel):
    user_id: str
    project_id: Optional[str] = None
    is_admin: bool
    permissions: List[str]
