"""
RBAC repositories: roles, the permission catalog and role grants.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from sqlalchemy import delete
from sqlmodel import select

from ..entities.rbac import Permission, Role, RolePermission
from .base import SQLModelRepository


class RoleRepository(SQLModelRepository[Role]):
    """Repository for configurable roles and their permission grants."""

    default_order = (Role.name,)

    def __init__(self, session) -> None:
        super().__init__(session, Role)

    async def get_by_name(self, name: str) -> Optional[Role]:
        return await self._first(select(Role).where(Role.name == name))

    async def permission_codes(self, role_id: str) -> Set[str]:
        """Return every permission code granted to a role."""
        stmt = (
            select(Permission.code)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def set_permissions(self, role_id: str, permissions: Iterable[Permission]) -> None:
        """Replace a role's grants with ``permissions``."""
        await self._execute_bulk(delete(RolePermission).where(RolePermission.role_id == role_id))
        for permission in permissions:
            self.session.add(RolePermission(role_id=role_id, permission_id=permission.id))
        await self.session.commit()


class PermissionRepository(SQLModelRepository[Permission]):
    """Repository for the permission catalog."""

    default_order = (Permission.module, Permission.code)

    def __init__(self, session) -> None:
        super().__init__(session, Permission)

    async def get_by_codes(self, codes: Iterable[str]) -> List[Permission]:
        codes = list(codes)
        if not codes:
            return []
        return await self._all(select(Permission).where(Permission.code.in_(codes)))  # type: ignore[attr-defined]

    async def ensure(self, entries: Iterable[tuple[str, str, Optional[str]]]) -> int:
        """Insert ``(code, module, description)`` entries that are missing.

        Returns:
            Number of permissions inserted
        """
        existing = {p.code for p in await self.list()}
        added = 0
        for code, module, description in entries:
            if code in existing:
                continue
            self.session.add(Permission(code=code, module=module, description=description))
            added += 1
        if added:
            await self.session.commit()
        return added
