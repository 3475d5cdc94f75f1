"""
Bill of Quantities endpoints.

The list endpoint feeds the BOQ grid: one page of items plus totals per
status and per category section. Spreadsheet import is a two-step flow:
``/boq/import/preview`` parses an upload without writing anything, then
``/boq/import`` stores the (possibly edited) rows.
"""

from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status

from interior_manager.core.database.entities.boq import BoqItem
from interior_manager.core.database.repositories.boq import BoqRepository
from interior_manager.core.errors import NotFoundError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import BoqBulkAction, BoqStatus
from interior_manager.core.models.io.boq import (
    BoqBulkRequest,
    BoqBulkResult,
    BoqImportPreview,
    BoqImportRequest,
    BoqImportResponse,
    BoqItemCreate,
    BoqItemEnvelope,
    BoqItemRead,
    BoqItemUpdate,
    BoqListResponse,
)
from interior_manager.server.services.access import require_project_access
from interior_manager.server.services.boq import build_list_response
from interior_manager.server.services.boq_import import parse_file
from interior_manager.server.services.deps import AdminUser, CurrentUser, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["boq"])


async def _load_item(session, user, item_id: str) -> BoqItem:
    item = await BoqRepository(session).get_by_id(item_id)
    if item is None:
        raise NotFoundError("BOQ item not found")
    await require_project_access(session, user, item.project_id)
    return item


@router.get(
    "",
    response_model=BoqListResponse,
    summary="List BOQ Items",
    description="One page of a project's BOQ with status counts and per-section totals.",
)
async def list_boq(
    user: CurrentUser,
    session: SessionDep,
    project_id: str = Query(description="Project whose BOQ to list"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    section: Optional[str] = Query(default=None, description="Category to show; 'all' or empty for every section"),
) -> BoqListResponse:
    await require_project_access(session, user, project_id)
    items = await BoqRepository(session).list_for_project(project_id, section=section, limit=limit, offset=offset)
    return build_list_response(items, limit=limit, offset=offset)


@router.post(
    "",
    response_model=BoqItemEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create BOQ Item",
    description="Add a line item. Without a sort order it is appended after the last item.",
)
async def create_boq_item(payload: BoqItemCreate, user: CurrentUser, session: SessionDep) -> BoqItemEnvelope:
    """
    Create a BOQ item.

    - **item_name**: required.
    - **quantity** / **rate**: non-negative; ``amount`` is their product.
    """
    await require_project_access(session, user, payload.project_id)
    repository = BoqRepository(session)
    data = payload.model_dump()
    if data.get("sort_order") is None:
        data["sort_order"] = await repository.max_sort_order(payload.project_id) + 1
    item = await repository.create(BoqItem(**data, created_by=user.id))
    return BoqItemEnvelope(item=BoqItemRead.model_validate(item))


@router.patch(
    "/{item_id}",
    response_model=BoqItemEnvelope,
    summary="Update BOQ Item",
    responses={404: {"description": "BOQ item not found"}},
)
async def update_boq_item(
    item_id: str, payload: BoqItemUpdate, user: CurrentUser, session: SessionDep
) -> BoqItemEnvelope:
    item = await _load_item(session, user, item_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(item, key, value)
    item = await BoqRepository(session).update(item)
    return BoqItemEnvelope(item=BoqItemRead.model_validate(item))


@router.delete(
    "/{item_id}",
    summary="Delete BOQ Item",
    responses={404: {"description": "BOQ item not found"}},
)
async def delete_boq_item(item_id: str, user: CurrentUser, session: SessionDep):
    item = await _load_item(session, user, item_id)
    await BoqRepository(session).delete(item.id)
    return {"success": True}


@router.put(
    "/bulk",
    response_model=BoqBulkResult,
    response_model_exclude_none=True,
    summary="Bulk BOQ Action",
    description="Update the status of, or delete, several items of one project.",
    responses={400: {"description": "Invalid action or missing status"}},
)
async def bulk_boq_action(payload: BoqBulkRequest, user: CurrentUser, session: SessionDep) -> BoqBulkResult:
    """
    Apply a bulk action.

    - **action**: `update_status` or `delete`.
    - **item_ids**: items to touch; ids from other projects are ignored.
    - **status**: required for `update_status`.
    """
    await require_project_access(session, user, payload.project_id)
    repository = BoqRepository(session)

    if payload.action == BoqBulkAction.update_status.value:
        if payload.status is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="status is required for update_status")
        updated = await repository.bulk_update_status(payload.project_id, payload.item_ids, payload.status)
        return BoqBulkResult(updated=updated)
    if payload.action == BoqBulkAction.delete.value:
        deleted = await repository.bulk_delete(payload.project_id, payload.item_ids)
        logger.info(f"Bulk deleted {deleted} BOQ item(s) from project {payload.project_id} by {user.id}")
        return BoqBulkResult(deleted=deleted)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid action: {payload.action}")


@router.post(
    "/import/preview",
    response_model=BoqImportPreview,
    summary="Preview BOQ Import",
    description="Parse an uploaded CSV or Excel sheet into BOQ rows without saving them.",
    responses={400: {"description": "The file could not be parsed"}},
)
async def preview_import(user: CurrentUser, file: UploadFile = File(...)) -> BoqImportPreview:
    content = await file.read()
    preview = parse_file(file.filename or "", content)
    logger.info(f"BOQ import preview by {user.id}: {file.filename} -> {len(preview.rows)} row(s)")
    return preview


@router.post(
    "/import",
    response_model=BoqImportResponse,
    summary="Import BOQ Rows",
    description="Store previewed rows as draft items at the end of the project's BOQ.",
)
async def import_boq(payload: BoqImportRequest, admin: AdminUser, session: SessionDep) -> BoqImportResponse:
    """
    Import BOQ rows.

    - **items**: rows as returned by the preview (edits allowed).
    - **category**: optional category applied to every row.
    """
    await require_project_access(session, admin, payload.project_id)
    repository = BoqRepository(session)
    next_order = await repository.max_sort_order(payload.project_id) + 1

    items = []
    for offset, row in enumerate(payload.items):
        data = row.model_dump()
        if payload.category:
            data["category"] = payload.category
        items.append(
            BoqItem(
                **data,
                project_id=payload.project_id,
                status=BoqStatus.draft.value,
                order_status="pending",
                sort_order=next_order + offset,
                created_by=admin.id,
            )
        )

    items = await repository.add_many(items)
    total = round(sum(item.amount for item in items), 2)
    logger.info(f"Imported {len(items)} BOQ item(s) into project {payload.project_id} (total {total})")
    return BoqImportResponse(
        imported_count=len(items),
        total_amount=total,
        items=[BoqItemRead.model_validate(item) for item in items],
    )
