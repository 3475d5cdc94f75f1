"""
User and login session repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, func
from sqlmodel import select

from ..base import utc_now
from ..entities.users import AuthSession, User
from .base import SQLModelRepository


class UserRepository(SQLModelRepository[User]):
    """Repository for user accounts."""

    default_order = (User.full_name,)

    def __init__(self, session) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        return await self._first(stmt)

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.username) == username.strip().lower())
        return await self._first(stmt)

    async def get_by_identifier(self, identifier: str) -> Optional[User]:
        """Resolve a login identifier: emails contain ``@``, anything else is a username."""
        if "@" in identifier:
            return await self.get_by_email(identifier)
        return await self.get_by_username(identifier)

    async def get_many(self, user_ids: List[str]) -> List[User]:
        if not user_ids:
            return []
        return await self._all(select(User).where(User.id.in_(user_ids)))  # type: ignore[attr-defined]


class AuthSessionRepository(SQLModelRepository[AuthSession]):
    """Repository for login sessions."""

    def __init__(self, session) -> None:
        super().__init__(session, AuthSession)

    async def get_by_token_hash(self, token_hash: str) -> Optional[AuthSession]:
        return await self._first(select(AuthSession).where(AuthSession.token_hash == token_hash))

    async def touch(self, auth_session: AuthSession) -> None:
        auth_session.last_seen_at = utc_now()
        self.session.add(auth_session)
        await self.session.commit()

    async def delete_for_user(self, user_id: str, *, keep_id: Optional[str] = None) -> int:
        """Delete a user's sessions, optionally keeping the current one."""
        stmt = delete(AuthSession).where(AuthSession.user_id == user_id)
        if keep_id:
            stmt = stmt.where(AuthSession.id != keep_id)
        result = await self._execute_bulk(stmt)
        await self.session.commit()
        return result.rowcount or 0
