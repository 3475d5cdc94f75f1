"""
Invoice and payment I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import InvoiceStatus, PaymentMethod
from .base import PartialUpdate


class InvoiceCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    project_id: str
    invoice_number: str = Field(min_length=1, max_length=64)
    total_amount: float = Field(ge=0)
    status: InvoiceStatus = Field(default=InvoiceStatus.pending)
    due_date: Optional[date] = None
    notes: Optional[str] = None


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    invoice_number: str
    total_amount: float
    status: str
    due_date: Optional[date] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    paid_amount: float = 0


class PaymentCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    project_id: str
    invoice_id: Optional[str] = None
    amount: float = Field(ge=0)
    payment_date: date
    payment_method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = Field(default=None, max_length=128)
    payment_proof_url: Optional[str] = None
    notes: Optional[str] = None


class PaymentUpdate(PartialUpdate):
    non_nullable = ("amount", "payment_date")

    amount: Optional[float] = Field(default=None, ge=0)
    payment_date: Optional[date] = None
    payment_method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = Field(default=None, max_length=128)
    payment_proof_url: Optional[str] = None
    notes: Optional[str] = None


class PaymentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    invoice_id: Optional[str] = None
    amount: float
    payment_date: date
    payment_method: Optional[str] = None
    reference_number: Optional[str] = None
    payment_proof_url: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime


class PaymentStats(BaseModel):
    total: int
    totalAmount: float
    byMethod: Dict[str, float]


class PaymentListResponse(BaseModel):
    payments: List[PaymentRead]
    stats: PaymentStats
