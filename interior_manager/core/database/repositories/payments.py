"""
Invoice and payment repositories.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from sqlalchemy import func
from sqlmodel import select

from ..entities.payments import Invoice, Payment
from .base import SQLModelRepository


class InvoiceRepository(SQLModelRepository[Invoice]):
    """Repository for invoices."""

    def __init__(self, session) -> None:
        super().__init__(session, Invoice)

    async def list_for_project(self, project_id: str) -> List[Invoice]:
        stmt = (
            select(Invoice)
            .where(Invoice.project_id == project_id)
            .order_by(Invoice.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)

    async def get_by_number(self, project_id: str, invoice_number: str) -> Optional[Invoice]:
        stmt = select(Invoice).where(Invoice.project_id == project_id, Invoice.invoice_number == invoice_number)
        return await self._first(stmt)

    async def paid_amount(self, invoice_id: str) -> float:
        result = await self.session.execute(
            select(func.coalesce(func.sum(Payment.amount), 0)).where(Payment.invoice_id == invoice_id)
        )
        return float(result.scalar_one())

    async def paid_amounts(self, invoice_ids: List[str]) -> Dict[str, float]:
        totals = {invoice_id: 0.0 for invoice_id in invoice_ids}
        if not invoice_ids:
            return totals
        stmt = (
            select(Payment.invoice_id, func.sum(Payment.amount))
            .where(Payment.invoice_id.in_(invoice_ids))  # type: ignore[union-attr]
            .group_by(Payment.invoice_id)
        )
        result = await self.session.execute(stmt)
        for invoice_id, total in result.all():
            totals[invoice_id] = float(total or 0)
        return totals


class PaymentRepository(SQLModelRepository[Payment]):
    """Repository for payments."""

    def __init__(self, session) -> None:
        super().__init__(session, Payment)

    async def list_for_project(self, project_id: str) -> List[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.project_id == project_id)
            .order_by(Payment.payment_date.desc(), Payment.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)

    async def list_for_invoice(self, invoice_id: str) -> List[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.invoice_id == invoice_id)
            .order_by(Payment.payment_date.desc(), Payment.created_at.desc())  # type: ignore[attr-defined]
        )
        return await self._all(stmt)
