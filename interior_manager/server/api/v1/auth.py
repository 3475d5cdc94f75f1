"""
Authentication endpoints.

Login returns a bearer token and also sets it as an HttpOnly cookie, so both
the mobile app (Authorization header) and the browser (cookie) can use it.
"""

from fastapi import APIRouter, HTTPException, Request, Response, status

from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.io.auth import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    UserRead,
)
from interior_manager.server.core.config import settings
from interior_manager.server.services.auth import AuthService
from interior_manager.server.services.deps import CurrentSessionDep, CurrentUser, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log In",
    description="Authenticate with a username or email plus password and open a session.",
    responses={
        400: {"description": "Missing credentials"},
        401: {"description": "Invalid username or password"},
        403: {"description": "Account disabled"},
    },
)
async def login(payload: LoginRequest, request: Request, response: Response, session: SessionDep) -> LoginResponse:
    """
    Log in.

    - **username** or **email**: the account identifier.
    - **password**: the account password.
    """
    identifier = (payload.username or payload.email or "").strip()
    if not identifier or not payload.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email and password are required",
        )

    service = AuthService(session)
    user = await service.authenticate(identifier, payload.password)
    raw_token, auth_session = await service.create_session(user, request.headers.get("user-agent"))

    config = settings.session
    response.set_cookie(
        config.cookie_name,
        raw_token,
        max_age=config.days * 24 * 3600,
        httponly=True,
        samesite="lax",
        secure=config.cookie_secure,
    )
    return LoginResponse(token=raw_token, expires_at=auth_session.expires_at, user=UserRead.model_validate(user))


@router.post(
    "/logout",
    summary="Log Out",
    description="End the current session and clear the session cookie.",
)
async def logout(current: CurrentSessionDep, response: Response, session: SessionDep):
    _, auth_session = current
    await AuthService(session).logout(auth_session)
    response.delete_cookie(settings.session.cookie_name)
    return {"success": True}


@router.get(
    "/session",
    response_model=UserRead,
    summary="Current Session",
    description="Return the user that owns the current session.",
    responses={401: {"description": "Not authenticated"}},
)
async def get_session_user(user: CurrentUser) -> UserRead:
    return UserRead.model_validate(user)


@router.post(
    "/change-password",
    summary="Change Password",
    description="Change the caller's password. Other sessions of the user are signed out.",
    responses={400: {"description": "Current password is incorrect"}},
)
async def change_password(payload: ChangePasswordRequest, current: CurrentSessionDep, session: SessionDep):
    """
    Change password.

    - **current_password**: the password in use now.
    - **new_password**: the replacement, at least 8 characters.
    """
    user, auth_session = current
    await AuthService(session).change_password(
        user, payload.current_password, payload.new_password, keep_session_id=auth_session.id
    )
    return {"success": True}
