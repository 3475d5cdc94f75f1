"""
Bill of Quantities entity model.

Each row is one priced line item; ``amount`` is always ``quantity * rate``
and is recomputed by the repository on every write.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, new_id, utc_now


class BoqItem(Base, table=True):
    """Table: boq_items"""

    __tablename__ = "boq_items"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    project_id: str = Field(foreign_key="projects.id", max_length=36, index=True)

    category: Optional[str] = Field(default=None, max_length=255, index=True)
    sub_category: Optional[str] = Field(default=None, max_length=255)
    item_name: str = Field(max_length=500)
    description: Optional[str] = Field(default=None, sa_type=Text)
    unit: str = Field(default="Nos", max_length=32)
    quantity: float = Field(default=0, ge=0)
    rate: float = Field(default=0, ge=0)
    amount: float = Field(default=0)

    status: str = Field(default="draft", max_length=32, index=True)
    item_type: str = Field(default="material", max_length=32)
    source: str = Field(default="bought_out", max_length=32)
    order_status: str = Field(default="pending", max_length=32)
    sort_order: int = Field(default=0)
    remarks: Optional[str] = Field(default=None, sa_type=Text)

    created_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=36)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def recompute_amount(self) -> None:
        self.amount = round((self.quantity or 0) * (self.rate or 0), 2)
