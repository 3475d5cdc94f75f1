"""
RBAC endpoints: the permission catalog, configurable roles and the caller's
effective permissions.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from interior_manager.core.database.entities.rbac import Role
from interior_manager.core.database.repositories.rbac import PermissionRepository, RoleRepository
from interior_manager.core.errors import ConflictError, NotFoundError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import PermissionNode
from interior_manager.core.models.io.rbac import (
    PermissionRead,
    RoleCreate,
    RolePermissionsUpdate,
    RoleRead,
    UserPermissionsRead,
)
from interior_manager.server.services.deps import CurrentUser, RBACDep, SessionDep
from interior_manager.server.services.rbac import ALL_PERMISSION_CODES, grants, is_valid_code

logger = get_logger(__name__)

router = APIRouter(tags=["rbac"])


async def _role_read(repository: RoleRepository, role: Role) -> RoleRead:
    codes = await repository.permission_codes(role.id)
    return RoleRead(id=role.id, name=role.name, description=role.description, permissions=sorted(codes))


@router.get(
    "/permissions",
    response_model=List[PermissionRead],
    summary="List Permissions",
    description="List the permission catalog grouped by module.",
)
async def list_permissions(_: CurrentUser, session: SessionDep) -> List[PermissionRead]:
    permissions = await PermissionRepository(session).list()
    return [PermissionRead.model_validate(p) for p in permissions]


@router.get(
    "/roles",
    response_model=List[RoleRead],
    summary="List Roles",
    description="List configurable roles with their granted permission codes.",
)
async def list_roles(user: CurrentUser, rbac: RBACDep, session: SessionDep) -> List[RoleRead]:
    await rbac.verify_permission(user, PermissionNode.users_manage_roles)
    repository = RoleRepository(session)
    return [await _role_read(repository, role) for role in await repository.list()]


@router.post(
    "/roles",
    response_model=RoleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Role",
    description="Create a configurable role with no permissions.",
    responses={409: {"description": "Role name already exists"}},
)
async def create_role(payload: RoleCreate, user: CurrentUser, rbac: RBACDep, session: SessionDep) -> RoleRead:
    await rbac.verify_permission(user, PermissionNode.users_manage_roles)
    repository = RoleRepository(session)
    if await repository.get_by_name(payload.name) is not None:
        raise ConflictError(f"Role '{payload.name}' already exists")
    role = await repository.create(Role(name=payload.name, description=payload.description))
    logger.info(f"Role created: {role.name} by {user.id}")
    return RoleRead(id=role.id, name=role.name, description=role.description)


@router.put(
    "/roles/{role_id}/permissions",
    response_model=RoleRead,
    summary="Set Role Permissions",
    description="Replace the permission set of a role. Module wildcards such as 'boq.*' are expanded.",
    responses={400: {"description": "Unknown permission code"}, 404: {"description": "Role not found"}},
)
async def set_role_permissions(
    role_id: str, payload: RolePermissionsUpdate, user: CurrentUser, rbac: RBACDep, session: SessionDep
) -> RoleRead:
    """
    Replace role permissions.

    - **codes**: concrete codes (``boq.view``), module wildcards (``boq.*``) or ``*``.
    """
    await rbac.verify_permission(user, PermissionNode.users_manage_roles)
    repository = RoleRepository(session)
    role = await repository.get_by_id(role_id)
    if role is None:
        raise NotFoundError("Role not found")

    invalid = [code for code in payload.codes if not is_valid_code(code)]
    if invalid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown permission codes: {', '.join(invalid)}",
        )

    await rbac.seed_permissions()
    concrete = [code for code in ALL_PERMISSION_CODES if grants(payload.codes, code)]
    permissions = await PermissionRepository(session).get_by_codes(concrete)
    await repository.set_permissions(role.id, permissions)
    logger.info(f"Role {role.name} now grants {len(permissions)} permission(s)")
    return await _role_read(repository, role)


@router.get(
    "/user-permissions",
    response_model=UserPermissionsRead,
    summary="My Permissions",
    description="Effective permission codes of the caller, optionally including a project membership.",
)
async def user_permissions(
    user: CurrentUser,
    rbac: RBACDep,
    project_id: Optional[str] = Query(default=None, description="Include grants from this project's membership"),
) -> UserPermissionsRead:
    return UserPermissionsRead(
        user_id=user.id,
        project_id=project_id,
        is_admin=user.is_admin,
        permissions=await rbac.effective_permissions(user, project_id),
    )
