"""
User administration endpoints (admin only).
"""

from fastapi import APIRouter, HTTPException, status

from interior_manager.core.database.repositories.rbac import RoleRepository
from interior_manager.core.database.repositories.users import UserRepository
from interior_manager.core.models.io.auth import UserCreate, UserRead
from interior_manager.server.services.auth import AuthService
from interior_manager.server.services.deps import AdminUser, SessionDep

router = APIRouter(tags=["users"])


@router.get(
    "",
    response_model=list[UserRead],
    summary="List Users",
    description="List every account, ordered by full name.",
)
async def list_users(_: AdminUser, session: SessionDep) -> list[UserRead]:
    users = await UserRepository(session).list()
    return [UserRead.model_validate(user) for user in users]


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create an account with an initial password.",
    responses={
        400: {"description": "Unknown role"},
        409: {"description": "Email or username already taken"},
    },
)
async def create_user(payload: UserCreate, _: AdminUser, session: SessionDep) -> UserRead:
    """
    Create a user.

    - **email**: unique login email.
    - **username**: optional unique login name.
    - **role**: built-in role (admin, project_manager, employee, client).
    - **role_id**: optional configurable RBAC role.
    """
    if payload.role_id and await RoleRepository(session).get_by_id(payload.role_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role not found")
    user = await AuthService(session).create_user(payload)
    return UserRead.model_validate(user)
