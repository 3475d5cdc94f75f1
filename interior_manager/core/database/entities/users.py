"""
User and login session entity models.

Users carry a built-in ``role`` (admin bypasses RBAC) plus an optional
``role_id`` pointing at a configurable RBAC role. Login sessions store only
the SHA-256 hash of the bearer token.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class User(Base, table=True):
    """Entity for application accounts.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    email: str = Field(max_length=255, unique=True, index=True)
    username: Optional[str] = Field(default=None, max_length=64, unique=True, index=True)
    full_name: str = Field(max_length=255)
    role: str = Field(default="employee", max_length=32, index=True)
    role_id: Optional[str] = Field(default=None, foreign_key="roles.id", max_length=36)
    phone_number: Optional[str] = Field(default=None, max_length=32)
    is_active: bool = Field(default=True)

    password_hash: str = Field(max_length=255)
    password_salt: str = Field(max_length=64)
    password_changed: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"


class AuthSession(Base, table=True):
    """Entity for login sessions.

    Table: auth_sessions
    """

    __tablename__ = "auth_sessions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    token_hash: str = Field(max_length=64, unique=True, index=True)
    user_agent: Optional[str] = Field(default=None, max_length=512)
    expires_at: datetime = Field(index=True)
    created_at: datetime = Field(default_factory=utc_now)
    last_seen_at: datetime = Field(default_factory=utc_now)
