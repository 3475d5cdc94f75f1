"""
Design file and design comment repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import delete, update
from sqlmodel import select

from ..entities.design_files import DesignComment, DesignFile
from .base import SQLModelRepository


class DesignFileRepository(SQLModelRepository[DesignFile]):
    """Repository for versioned design files."""

    def __init__(self, session) -> None:
        super().__init__(session, DesignFile)

    async def list_for_project(self, project_id: str) -> List[DesignFile]:
        stmt = (
            select(DesignFile)
            .where(DesignFile.project_id == project_id)
            .order_by(DesignFile.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)

    async def versions(self, project_id: str, file_name: str) -> List[DesignFile]:
        """All versions of a file name within a project, newest version first."""
        stmt = (
            select(DesignFile)
            .where(DesignFile.project_id == project_id, DesignFile.file_name == file_name)
            .order_by(DesignFile.version_number.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)

    async def latest_version(self, project_id: str, file_name: str) -> Optional[DesignFile]:
        versions = await self.versions(project_id, file_name)
        return versions[0] if versions else None

    async def get_many(self, design_ids: List[str]) -> List[DesignFile]:
        if not design_ids:
            return []
        stmt = (
            select(DesignFile)
            .where(DesignFile.id.in_(design_ids))  # type: ignore[attr-defined]
            .order_by(DesignFile.created_at)  # type: ignore[arg-type]
        )
        return await self._all(stmt)

    async def update_many(self, designs: List[DesignFile]) -> int:
        for design in designs:
            self.session.add(design)
        await self.session.commit()
        return len(designs)

    async def clear_current_approved(self, project_id: str) -> None:
        """Unset ``is_current_approved`` on every design in the project (no commit)."""
        await self._execute_bulk(
            update(DesignFile).where(DesignFile.project_id == project_id).values(is_current_approved=False)
        )

    async def delete_with_comments(self, design_id: str) -> bool:
        design = await self.get_by_id(design_id)
        if design is None:
            return False
        await self._execute_bulk(delete(DesignComment).where(DesignComment.design_file_id == design_id))
        await self.session.delete(design)
        await self.session.commit()
        return True


class DesignCommentRepository(SQLModelRepository[DesignComment]):
    """Repository for comments on design files."""

    def __init__(self, session) -> None:
        super().__init__(session, DesignComment)

    async def list_for_designs(self, design_ids: List[str]) -> Dict[str, List[DesignComment]]:
        """Comments grouped by design id, oldest first."""
        grouped: Dict[str, List[DesignComment]] = {design_id: [] for design_id in design_ids}
        if not design_ids:
            return grouped
        stmt = (
            select(DesignComment)
            .where(DesignComment.design_file_id.in_(design_ids))  # type: ignore[attr-defined]
            .order_by(DesignComment.created_at)  # type: ignore[arg-type]
        )
        for comment in await self._all(stmt):
            grouped.setdefault(comment.design_file_id, []).append(comment)
        return grouped
