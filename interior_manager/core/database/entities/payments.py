"""
Invoice and payment entity models.

An invoice flips to ``paid`` once the sum of its payments reaches
``total_amount``.
"""

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, Text, UniqueConstraint

from ..base import Base, new_id, utc_now


class Invoice(Base, table=True):
    """Table: invoices"""

    __tablename__ = "invoices"
    __table_args__ = (UniqueConstraint("project_id", "invoice_number", name="uq_invoice_number"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    project_id: str = Field(foreign_key="projects.id", max_length=36, index=True)
    invoice_number: str = Field(max_length=64)
    total_amount: float = Field(default=0, ge=0)
    status: str = Field(default="pending", max_length=16, index=True)
    due_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None, sa_type=Text)
    created_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36)
    created_at: datetime = Field(default_factory=utc_now)


class Payment(Base, table=True):
    """Table: payments"""

    __tablename__ = "payments"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    project_id: str = Field(foreign_key="projects.id", max_length=36, index=True)
    invoice_id: Optional[str] = Field(default=None, foreign_key="invoices.id", max_length=36, index=True)
    amount: float = Field(ge=0)
    payment_date: date = Field(index=True)
    payment_method: Optional[str] = Field(default=None, max_length=16)
    reference_number: Optional[str] = Field(default=None, max_length=128)
    payment_proof_url: Optional[str] = Field(default=None, sa_type=Text)
    notes: Optional[str] = Field(default=None, sa_type=Text)
    created_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36)
    created_at: datetime = Field(default_factory=utc_now)
