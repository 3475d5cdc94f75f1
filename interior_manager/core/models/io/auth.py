"""
Authentication and user account I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import UserRole


class LoginRequest(BaseModel):
    """Login with either a username or an email address.

    All fields are optional at the schema level so that the endpoint can
    answer a missing credential with its own 400 message.
    """

    username: Optional[str] = Field(default=None, description="Username (alternative to email)")
    email: Optional[str] = Field(default=None, description="Email address (alternative to username)")
    password: Optional[str] = Field(default=None, description="Account password")


class UserRead(BaseModel):
    """Public view of a user account (no password material)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    username: Optional[str] = None
    full_name: str
    role: str
    role_id: Optional[str] = None
    phone_number: Optional[str] = None
    is_active: bool
    password_changed: bool
    created_at: datetime


class UserRef(BaseModel):
    """Author of a timeline entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str


class LoginResponse(BaseModel):
    token: str = Field(description="Bearer token; also set as the session cookie")
    expires_at: datetime
    user: UserRead


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, description="New password, at least 8 characters")


class UserCreate(BaseModel):
    """Schema for an administrator creating an account."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    username: Optional[str] = Field(default=None, min_length=2, max_length=64)
    full_name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8)
    role: UserRole = Field(default=UserRole.employee)
    role_id: Optional[str] = Field(default=None, description="Configurable RBAC role")
    phone_number: Optional[str] = Field(default=None, max_length=32)
