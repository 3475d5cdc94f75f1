"""
API Dependencies.

Provides the database session, the authenticated user, and the service
objects that endpoints receive through FastAPI dependency injection.

The session token is read from ``Authorization: Bearer <token>`` first and
then from the session cookie.
"""

from typing import Annotated, Optional

from fastapi import BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from interior_manager.core.database import get_session
from interior_manager.core.database.entities.users import AuthSession, User
from interior_manager.core.errors import AuthenticationError
from interior_manager.server.core.config import settings
from interior_manager.server.services.auth import AuthService
from interior_manager.server.services.notifications import NotificationService
from interior_manager.server.services.push import OneSignalClient, get_push_client
from interior_manager.server.services.rbac import RBACService

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def extract_token(request: Request) -> Optional[str]:
    """Return the raw session token from the Authorization header or the cookie."""
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.session.cookie_name)


async def get_current_session(request: Request, session: SessionDep) -> tuple[User, AuthSession]:
    try:
        return await AuthService(session).resolve(extract_token(request))
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


CurrentSessionDep = Annotated[tuple[User, AuthSession], Depends(get_current_session)]


async def get_current_user(current: CurrentSessionDep) -> User:
    return current[0]


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(user: CurrentUser) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


AdminUser = Annotated[User, Depends(require_admin)]


def get_rbac_service(session: SessionDep) -> RBACService:
    return RBACService(session)


RBACDep = Annotated[RBACService, Depends(get_rbac_service)]

PushClientDep = Annotated[OneSignalClient, Depends(get_push_client)]


def get_notification_service(
    session: SessionDep, push_client: PushClientDep, background_tasks: BackgroundTasks
) -> NotificationService:
    """Push notifications are sent once the response is on its way."""
    return NotificationService(session, push_client, background_tasks=background_tasks)


NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
