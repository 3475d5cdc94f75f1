"""
Role-based access control.

Resolution order for a permission check:
1. ``admin`` accounts are allowed everything.
2. Permissions granted to the user's configurable role (``users.role_id``),
   matched exactly or through a module wildcard such as ``boq.*``.
3. When a project is given, the permission list on the user's membership
   row for that project (``*`` grants everything on the project).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Set, Union

from sqlalchemy.ext.asyncio import AsyncSession

from interior_manager.core.database.entities.users import User
from interior_manager.core.database.repositories.projects import ProjectMemberRepository
from interior_manager.core.database.repositories.rbac import PermissionRepository, RoleRepository
from interior_manager.core.database.repositories.users import UserRepository
from interior_manager.core.errors import PermissionDeniedError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import PermissionNode

logger = get_logger(__name__)

NodeLike = Union[PermissionNode, str]

ALL_PERMISSION_CODES = [node.value for node in PermissionNode]


def _code(node: NodeLike) -> str:
    return node.value if isinstance(node, PermissionNode) else str(node)


def grants(granted: Iterable[str], node: NodeLike) -> bool:
    """True when ``granted`` contains the node, its module wildcard, or ``*``."""
    code = _code(node)
    granted = set(granted)
    if code in granted or "*" in granted:
        return True
    module = code.split(".", 1)[0]
    return f"{module}.*" in granted


def is_valid_code(code: str) -> bool:
    """Accept concrete permission codes, module wildcards and ``*``."""
    if code == "*" or code in ALL_PERMISSION_CODES:
        return True
    if code.endswith(".*"):
        return any(node.module == code[:-2] for node in PermissionNode)
    return False


@dataclass(frozen=True)
class PermissionCheckResult:
    allowed: bool
    reason: Optional[str] = None


class RBACService:
    """Permission checks backed by roles and project memberships."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.roles = RoleRepository(session)
        self.permissions = PermissionRepository(session)
        self.members = ProjectMemberRepository(session)

    async def _role_codes(self, user: User) -> Set[str]:
        if not user.role_id:
            return set()
        return await self.roles.permission_codes(user.role_id)

    async def _project_codes(self, user: User, project_id: Optional[str]) -> Set[str]:
        if not project_id:
            return set()
        member = await self.members.get_member(project_id, user.id)
        return set(member.permissions or []) if member else set()

    async def check_permission(
        self, user: Union[User, str], node: NodeLike, project_id: Optional[str] = None
    ) -> PermissionCheckResult:
        """
        Check whether a user holds a permission.

        Args:
            user: User entity or user ID
            node: Permission code to check
            project_id: Also consult the user's membership on this project

        Returns:
            PermissionCheckResult with the decision and a reason when denied
        """
        if isinstance(user, str):
            resolved = await self.users.get_by_id(user)
            if resolved is None:
                return PermissionCheckResult(False, "User not found")
            user = resolved

        if user.is_admin:
            return PermissionCheckResult(True)

        if grants(await self._role_codes(user), node):
            return PermissionCheckResult(True)

        if project_id and grants(await self._project_codes(user, project_id), node):
            return PermissionCheckResult(True)

        return PermissionCheckResult(False, "Permission denied")

    async def verify_permission(self, user: Union[User, str], node: NodeLike, project_id: Optional[str] = None) -> None:
        """
        Require a permission.

        Raises:
            PermissionDeniedError: ``"Permission denied: <node> is required"``
        """
        result = await self.check_permission(user, node, project_id)
        if not result.allowed:
            user_id = user if isinstance(user, str) else user.id
            logger.info(f"Permission {_code(node)} denied for user {user_id} (project={project_id}): {result.reason}")
            raise PermissionDeniedError(f"Permission denied: {_code(node)} is required")

    async def has_any_permission(
        self, user: Union[User, str], nodes: Iterable[NodeLike], project_id: Optional[str] = None
    ) -> bool:
        for node in nodes:
            if (await self.check_permission(user, node, project_id)).allowed:
                return True
        return False

    async def has_all_permission(
        self, user: Union[User, str], nodes: Iterable[NodeLike], project_id: Optional[str] = None
    ) -> bool:
        for node in nodes:
            if not (await self.check_permission(user, node, project_id)).allowed:
                return False
        return True

    async def effective_permissions(self, user: User, project_id: Optional[str] = None) -> list[str]:
        """Expand every grant (including wildcards) into concrete permission codes."""
        if user.is_admin:
            return list(ALL_PERMISSION_CODES)
        granted = await self._role_codes(user) | await self._project_codes(user, project_id)
        return [code for code in ALL_PERMISSION_CODES if grants(granted, code)]

    async def seed_permissions(self) -> int:
        """Ensure every ``PermissionNode`` exists in the permission catalog."""
        added = await self.permissions.ensure(
            (node.value, node.module, node.name.replace("_", " ").capitalize()) for node in PermissionNode
        )
        if added:
            logger.info(f"Seeded {added} permission(s) into the catalog")
        return added
