"""
Authentication service.

Passwords are hashed with PBKDF2-HMAC-SHA256 and a random per-user salt.
Login sessions are opaque random tokens; only their SHA-256 hash is stored,
so a leaked ``auth_sessions`` table cannot be replayed.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from interior_manager.core.database.base import utc_now
from interior_manager.core.database.entities.users import AuthSession, User
from interior_manager.core.database.repositories.users import AuthSessionRepository, UserRepository
from interior_manager.core.errors import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ValidationFailedError,
)
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.io.auth import UserCreate
from interior_manager.server.core.config import settings

logger = get_logger(__name__)

PBKDF2_ITERATIONS = 310_000
INVALID_CREDENTIALS = "Invalid username or password"


def hash_password(password: str, salt_b64: Optional[str] = None) -> Tuple[str, str]:
    """Hash a password.

    Args:
        password: Plain-text password
        salt_b64: Existing base64 salt; a new 16-byte salt is drawn when omitted

    Returns:
        ``(hash_b64, salt_b64)``
    """
    salt = base64.b64decode(salt_b64) if salt_b64 else secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return base64.b64encode(digest).decode("utf-8"), base64.b64encode(salt).decode("utf-8")


def verify_password(password: str, expected_hash: str, salt_b64: str) -> bool:
    computed, _ = hash_password(password, salt_b64)
    return hmac.compare_digest(computed, expected_hash)


def token_hash(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class AuthService:
    """Login, logout, session resolution and password management."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.sessions = AuthSessionRepository(session)

    async def authenticate(self, identifier: str, password: str) -> User:
        """
        Verify credentials.

        Unknown identifiers and wrong passwords produce the same error so the
        response does not reveal which accounts exist.

        Raises:
            AuthenticationError: Bad identifier or password
            PermissionDeniedError: The account is deactivated
        """
        user = await self.users.get_by_identifier(identifier)
        if user is None or not verify_password(password, user.password_hash, user.password_salt):
            logger.info(f"Failed login attempt for '{identifier}'")
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not user.is_active:
            raise PermissionDeniedError("Account is disabled")
        return user

    async def create_session(self, user: User, user_agent: Optional[str] = None) -> Tuple[str, AuthSession]:
        """Open a login session and return the raw token with its stored row."""
        raw_token = secrets.token_urlsafe(32)
        auth_session = AuthSession(
            user_id=user.id,
            token_hash=token_hash(raw_token),
            user_agent=(user_agent or "")[:512] or None,
            expires_at=utc_now() + timedelta(days=settings.session.days),
        )
        await self.sessions.create(auth_session)
        logger.info(f"User {user.id} logged in; session expires {auth_session.expires_at.isoformat()}")
        return raw_token, auth_session

    async def resolve(self, raw_token: Optional[str]) -> Tuple[User, AuthSession]:
        """
        Resolve a bearer token to its user.

        Expired sessions are deleted when they are seen.

        Raises:
            AuthenticationError: Missing, unknown or expired token, or inactive user
        """
        if not raw_token:
            raise AuthenticationError("Not authenticated")
        auth_session = await self.sessions.get_by_token_hash(token_hash(raw_token))
        if auth_session is None:
            raise AuthenticationError("Invalid session")
        if auth_session.expires_at <= utc_now():
            await self.sessions.delete(auth_session.id)
            raise AuthenticationError("Session expired")
        user = await self.users.get_by_id(auth_session.user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("Invalid session")
        await self.sessions.touch(auth_session)
        return user, auth_session

    async def logout(self, auth_session: AuthSession) -> None:
        await self.sessions.delete(auth_session.id)
        logger.info(f"User {auth_session.user_id} logged out")

    async def change_password(
        self, user: User, current_password: str, new_password: str, *, keep_session_id: Optional[str] = None
    ) -> None:
        """
        Change a user's password and sign out their other sessions.

        Raises:
            ValidationFailedError: The current password is wrong
        """
        if not verify_password(current_password, user.password_hash, user.password_salt):
            raise ValidationFailedError("Current password is incorrect")
        user.password_hash, user.password_salt = hash_password(new_password)
        user.password_changed = True
        user.updated_at = utc_now()
        await self.users.update(user)
        revoked = await self.sessions.delete_for_user(user.id, keep_id=keep_session_id)
        logger.info(f"Password changed for user {user.id}; revoked {revoked} other session(s)")

    async def create_user(self, payload: UserCreate) -> User:
        """
        Create an account.

        Raises:
            ConflictError: The email or username is already taken
        """
        if await self.users.get_by_email(payload.email):
            raise ConflictError(f"Email '{payload.email}' is already registered")
        if payload.username and await self.users.get_by_username(payload.username):
            raise ConflictError(f"Username '{payload.username}' is already taken")

        password_hash, password_salt = hash_password(payload.password)
        user = User(
            email=payload.email.strip().lower(),
            username=payload.username.strip() if payload.username else None,
            full_name=payload.full_name,
            role=payload.role,
            role_id=payload.role_id,
            phone_number=payload.phone_number,
            password_hash=password_hash,
            password_salt=password_salt,
        )
        user = await self.users.create(user)
        logger.info(f"Created user {user.id} ({user.email}) with role {user.role}")
        return user
