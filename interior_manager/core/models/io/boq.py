"""
Bill of Quantities I/O models.

List responses keep the camelCase keys (``totalAmount``, ``statusCounts``,
``sectionTotals``, ``hasMore``) that the BOQ grid client reads.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import BoqStatus
from .base import PartialUpdate


class BoqItemCreate(BaseModel):
    """Schema for creating a BOQ line item."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    project_id: str
    category: Optional[str] = Field(default=None, max_length=255)
    sub_category: Optional[str] = Field(default=None, max_length=255)
    item_name: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    unit: str = Field(default="Nos", min_length=1, max_length=32)
    quantity: float = Field(default=0, ge=0)
    rate: float = Field(default=0, ge=0)
    status: BoqStatus = Field(default=BoqStatus.draft)
    item_type: str = Field(default="material", max_length=32)
    source: str = Field(default="bought_out", max_length=32)
    order_status: str = Field(default="pending", max_length=32)
    sort_order: Optional[int] = Field(default=None, description="Appended after the last item when omitted")
    remarks: Optional[str] = None


class BoqItemUpdate(PartialUpdate):
    """Schema for partially updating a BOQ line item."""

    non_nullable = (
        "item_name", "unit", "quantity", "rate", "status", "item_type", "source", "order_status", "sort_order",
    )

    category: Optional[str] = Field(default=None, max_length=255)
    sub_category: Optional[str] = Field(default=None, max_length=255)
    item_name: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = None
    unit: Optional[str] = Field(default=None, min_length=1, max_length=32)
    quantity: Optional[float] = Field(default=None, ge=0)
    rate: Optional[float] = Field(default=None, ge=0)
    status: Optional[BoqStatus] = None
    item_type: Optional[str] = None
    source: Optional[str] = None
    order_status: Optional[str] = None
    sort_order: Optional[int] = None
    remarks: Optional[str] = None


class BoqItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_id: str
    category: Optional[str] = None
    sub_category: Optional[str] = None
    item_name: str
    description: Optional[str] = None
    unit: str
    quantity: float
    rate: float
    amount: float
    status: str
    item_type: str
    source: str
    order_status: str
    sort_order: int
    remarks: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class BoqItemEnvelope(BaseModel):
    item: BoqItemRead


class SectionTotal(BaseModel):
    count: int = 0
    amount: float = 0


class BoqPagination(BaseModel):
    limit: int
    offset: int
    hasMore: bool


class BoqListResponse(BaseModel):
    items: List[BoqItemRead]
    totalAmount: float
    statusCounts: Dict[str, int]
    totalItems: int
    sectionTotals: Dict[str, SectionTotal]
    pagination: BoqPagination


class BoqBulkRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    action: str = Field(description="update_status or delete")
    project_id: str
    item_ids: List[str] = Field(min_length=1)
    status: Optional[BoqStatus] = Field(default=None, description="Required for update_status")


class BoqBulkResult(BaseModel):
    success: bool = True
    updated: Optional[int] = None
    deleted: Optional[int] = None


class BoqImportRow(BaseModel):
    """One normalized row parsed from an uploaded spreadsheet."""

    item_name: str = Field(min_length=1, max_length=500)
    category: str = Field(default="Uncategorized")
    description: str = Field(default="")
    unit: str = Field(default="Nos")
    quantity: float = Field(default=0, ge=0)
    rate: float = Field(default=0, ge=0)
    item_type: str = Field(default="material")
    source: str = Field(default="bought_out")


class BoqImportPreview(BaseModel):
    rows: List[BoqImportRow]
    errors: List[str]


class BoqImportRequest(BaseModel):
    project_id: str
    items: List[BoqImportRow] = Field(min_length=1)
    category: Optional[str] = Field(default=None, description="Overrides the category of every row")


class BoqImportResponse(BaseModel):
    success: bool = True
    imported_count: int
    total_amount: float
    items: List[BoqItemRead]
