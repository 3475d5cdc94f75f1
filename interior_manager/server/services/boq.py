"""
BOQ aggregation helpers.

The BOQ grid groups line items by category ("section") and shows per-section
and overall totals. These helpers compute those views from a list of items.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from interior_manager.core.database.entities.boq import BoqItem
from interior_manager.core.models.domain.enums import BoqStatus
from interior_manager.core.models.io.boq import (
    BoqItemRead,
    BoqListResponse,
    BoqPagination,
    SectionTotal,
)

UNCATEGORIZED = "Uncategorized"


def section_name(item: BoqItem) -> str:
    return item.category or UNCATEGORIZED


def group_by_category(items: Iterable[BoqItem]) -> Dict[str, List[BoqItem]]:
    """Group items by category, keeping categories in order of first appearance."""
    groups: Dict[str, List[BoqItem]] = {}
    for item in items:
        groups.setdefault(section_name(item), []).append(item)
    return groups


def section_totals(items: Iterable[BoqItem]) -> Dict[str, SectionTotal]:
    totals: Dict[str, SectionTotal] = {}
    for name, group in group_by_category(items).items():
        totals[name] = SectionTotal(count=len(group), amount=round(sum(i.amount or 0 for i in group), 2))
    return totals


def status_counts(items: Iterable[BoqItem]) -> Dict[str, int]:
    counts = {status.value: 0 for status in BoqStatus}
    for item in items:
        if item.status in counts:
            counts[item.status] += 1
    return counts


def build_list_response(items: Sequence[BoqItem], *, limit: int, offset: int) -> BoqListResponse:
    """Assemble the BOQ grid payload for one page of items."""
    return BoqListResponse(
        items=[BoqItemRead.model_validate(item) for item in items],
        totalAmount=round(sum(item.amount or 0 for item in items), 2),
        statusCounts=status_counts(items),
        totalItems=len(items),
        sectionTotals=section_totals(items),
        pagination=BoqPagination(limit=limit, offset=offset, hasMore=len(items) == limit),
    )
