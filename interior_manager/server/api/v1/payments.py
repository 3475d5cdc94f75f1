"""
Invoice and payment endpoints.

An invoice is marked paid once the payments recorded against it cover its
total, and returns to pending when an edit or delete drops them below it.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from interior_manager.core.database.entities.payments import Invoice, Payment
from interior_manager.core.database.repositories.payments import InvoiceRepository, PaymentRepository
from interior_manager.core.errors import ConflictError, NotFoundError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import InvoiceStatus, PaymentMethod
from interior_manager.core.models.io.payments import (
    InvoiceCreate,
    InvoiceRead,
    PaymentCreate,
    PaymentListResponse,
    PaymentRead,
    PaymentStats,
    PaymentUpdate,
)
from interior_manager.server.services.access import require_project_access
from interior_manager.server.services.deps import AdminUser, CurrentUser, NotificationServiceDep, SessionDep

logger = get_logger(__name__)

invoices_router = APIRouter(tags=["invoices"])
router = APIRouter(tags=["payments"])


async def sync_invoice_status(session, invoice_id: Optional[str]) -> Optional[Invoice]:
    """Mark an invoice paid when its payments cover the total; revert a paid invoice that is no longer covered."""
    if not invoice_id:
        return None
    repository = InvoiceRepository(session)
    invoice = await repository.get_by_id(invoice_id)
    if invoice is None:
        return None

    paid = await repository.paid_amount(invoice.id)
    if paid >= invoice.total_amount:
        new_status = InvoiceStatus.paid.value
    elif invoice.status == InvoiceStatus.paid.value:
        new_status = InvoiceStatus.pending.value
    else:
        return invoice

    if new_status != invoice.status:
        logger.info(f"Invoice {invoice.invoice_number} ({invoice.id}): {invoice.status} -> {new_status}")
        invoice.status = new_status
        invoice = await repository.update(invoice)
    return invoice


def payment_stats(payments: List[Payment]) -> PaymentStats:
    by_method = {method.value: 0.0 for method in PaymentMethod}
    for payment in payments:
        if payment.payment_method in by_method:
            by_method[payment.payment_method] += payment.amount or 0
    return PaymentStats(
        total=len(payments),
        totalAmount=round(sum(p.amount or 0 for p in payments), 2),
        byMethod=by_method,
    )


# Invoices


@invoices_router.get(
    "",
    response_model=List[InvoiceRead],
    summary="List Invoices",
    description="List a project's invoices with the amount paid against each.",
)
async def list_invoices(
    user: CurrentUser, session: SessionDep, project_id: str = Query(description="Project to list invoices for")
) -> List[InvoiceRead]:
    await require_project_access(session, user, project_id)
    repository = InvoiceRepository(session)
    invoices = await repository.list_for_project(project_id)
    paid = await repository.paid_amounts([invoice.id for invoice in invoices])

    result = []
    for invoice in invoices:
        data = InvoiceRead.model_validate(invoice)
        data.paid_amount = paid.get(invoice.id, 0.0)
        result.append(data)
    return result


@invoices_router.post(
    "",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Invoice",
    responses={409: {"description": "Invoice number already used in this project"}},
)
async def create_invoice(
    payload: InvoiceCreate, admin: AdminUser, session: SessionDep, notifications: NotificationServiceDep
) -> InvoiceRead:
    """
    Create an invoice.

    - **invoice_number**: unique within the project.
    - **total_amount**: invoice total in rupees.
    """
    project = await require_project_access(session, admin, payload.project_id)
    repository = InvoiceRepository(session)
    if await repository.get_by_number(project.id, payload.invoice_number) is not None:
        raise ConflictError(f"Invoice {payload.invoice_number} already exists for this project")

    invoice = await repository.create(Invoice(**payload.model_dump(), created_by=admin.id))
    logger.info(f"Invoice created: {invoice.invoice_number} ({invoice.id}) for project {project.id}")

    if project.created_by and project.created_by != admin.id:
        await notifications.notify_invoice_created(
            project.created_by, invoice.invoice_number, project.title, invoice.total_amount, project.id
        )
    return InvoiceRead.model_validate(invoice)


# Payments


@router.get(
    "",
    response_model=PaymentListResponse,
    summary="List Payments",
    description="List payments of a project or of one invoice, newest payment date first, with totals.",
    responses={400: {"description": "Neither project_id nor invoice_id given"}},
)
async def list_payments(
    user: CurrentUser,
    session: SessionDep,
    project_id: Optional[str] = Query(default=None),
    invoice_id: Optional[str] = Query(default=None),
) -> PaymentListResponse:
    repository = PaymentRepository(session)
    if invoice_id:
        invoice = await InvoiceRepository(session).get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice not found")
        await require_project_access(session, user, invoice.project_id)
        payments = await repository.list_for_invoice(invoice_id)
    elif project_id:
        await require_project_access(session, user, project_id)
        payments = await repository.list_for_project(project_id)
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="project_id or invoice_id is required")

    return PaymentListResponse(
        payments=[PaymentRead.model_validate(p) for p in payments],
        stats=payment_stats(payments),
    )


@router.post(
    "",
    response_model=PaymentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record Payment",
    description="Record a payment, optionally against an invoice of the same project.",
    responses={400: {"description": "Invoice belongs to another project"}},
)
async def create_payment(
    payload: PaymentCreate, admin: AdminUser, session: SessionDep, notifications: NotificationServiceDep
) -> PaymentRead:
    project = await require_project_access(session, admin, payload.project_id)
    if payload.invoice_id:
        invoice = await InvoiceRepository(session).get_by_id(payload.invoice_id)
        if invoice is None or invoice.project_id != project.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invoice does not belong to this project",
            )

    payment = await PaymentRepository(session).create(Payment(**payload.model_dump(), created_by=admin.id))
    logger.info(f"Payment recorded: {payment.amount} for project {project.id} (invoice={payment.invoice_id})")
    await sync_invoice_status(session, payment.invoice_id)

    if project.created_by and project.created_by != admin.id:
        await notifications.notify_payment_recorded(project.created_by, project.title, payment.amount, project.id)
    return PaymentRead.model_validate(payment)


@router.patch(
    "/{payment_id}",
    response_model=PaymentRead,
    summary="Update Payment",
    responses={404: {"description": "Payment not found"}},
)
async def update_payment(
    payment_id: str, payload: PaymentUpdate, admin: AdminUser, session: SessionDep
) -> PaymentRead:
    repository = PaymentRepository(session)
    payment = await repository.get_by_id(payment_id)
    if payment is None:
        raise NotFoundError("Payment not found")
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(payment, key, value)
    payment = await repository.update(payment)
    await sync_invoice_status(session, payment.invoice_id)
    return PaymentRead.model_validate(payment)


@router.delete(
    "/{payment_id}",
    summary="Delete Payment",
    responses={404: {"description": "Payment not found"}},
)
async def delete_payment(payment_id: str, admin: AdminUser, session: SessionDep):
    repository = PaymentRepository(session)
    payment = await repository.get_by_id(payment_id)
    if payment is None:
        raise NotFoundError("Payment not found")
    invoice_id = payment.invoice_id
    await repository.delete(payment.id)
    await sync_invoice_status(session, invoice_id)
    logger.info(f"Payment deleted: {payment_id} by {admin.id}")
    return {"success": True}
