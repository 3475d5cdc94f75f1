"""
RBAC entity models.

Roles hold a set of permission codes through the ``role_permissions`` link
table. The permission catalog is seeded from ``PermissionNode``.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text, UniqueConstraint

from ..base import Base, new_id, utc_now


class Role(Base, table=True):
    """Table: roles"""

    __tablename__ = "roles"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    name: str = Field(max_length=64, unique=True, index=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    created_at: datetime = Field(default_factory=utc_now)


class Permission(Base, table=True):
    """Table: permissions"""

    __tablename__ = "permissions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    code: str = Field(max_length=64, unique=True, index=True)
    module: str = Field(max_length=32, index=True)
    description: Optional[str] = Field(default=None, sa_type=Text)


class RolePermission(Base, table=True):
    """Table: role_permissions"""

    __tablename__ = "role_permissions"
    __table_args__ = (UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    role_id: str = Field(foreign_key="roles.id", max_length=36, index=True)
    permission_id: str = Field(foreign_key="permissions.id", max_length=36, index=True)
