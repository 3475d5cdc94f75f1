"""
BOQ item repository.

Every write path recomputes ``amount`` before persisting.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, func, update
from sqlmodel import select

from ..base import utc_now
from ..entities.boq import BoqItem
from .base import QueryBuilder, SQLModelRepository


class BoqRepository(SQLModelRepository[BoqItem]):
    """Repository for bill-of-quantities line items."""

    def __init__(self, session) -> None:
        super().__init__(session, BoqItem)

    async def create(self, entity: BoqItem) -> BoqItem:
        entity.recompute_amount()
        return await super().create(entity)

    async def update(self, entity: BoqItem) -> BoqItem:
        entity.recompute_amount()
        entity.updated_at = utc_now()
        return await super().update(entity)

    async def add_many(self, items: List[BoqItem]) -> List[BoqItem]:
        """Insert several items in one transaction."""
        for item in items:
            item.recompute_amount()
            self.session.add(item)
        await self.session.commit()
        for item in items:
            await self.session.refresh(item)
        return items

    async def list_for_project(
        self,
        project_id: str,
        *,
        section: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[BoqItem]:
        """List a project's items in grid order: sort_order, category, created_at."""
        stmt = select(BoqItem).where(BoqItem.project_id == project_id)
        if section and section != "all":
            stmt = stmt.where(BoqItem.category == section)
        stmt = stmt.order_by(BoqItem.sort_order, BoqItem.category, BoqItem.created_at)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        return await self._all(stmt)

    async def max_sort_order(self, project_id: str) -> int:
        result = await self.session.execute(
            select(func.max(BoqItem.sort_order)).where(BoqItem.project_id == project_id)
        )
        value = result.scalar_one_or_none()
        return int(value) if value is not None else 0

    async def bulk_update_status(self, project_id: str, item_ids: List[str], status: str) -> int:
        stmt = (
            update(BoqItem)
            .where(BoqItem.project_id == project_id, BoqItem.id.in_(item_ids))  # type: ignore[attr-defined]
            .values(status=status, updated_at=utc_now())
        )
        result = await self._execute_bulk(stmt)
        await self.session.commit()
        return result.rowcount or 0

    async def bulk_delete(self, project_id: str, item_ids: List[str]) -> int:
        stmt = delete(BoqItem).where(BoqItem.project_id == project_id, BoqItem.id.in_(item_ids))  # type: ignore[attr-defined]
        result = await self._execute_bulk(stmt)
        await self.session.commit()
        return result.rowcount or 0
