"""
Recycle bin endpoints.

Listing sweeps expired records first, so nothing past its retention
window is ever shown.
"""

from fastapi import APIRouter, Depends, status

from propdiary.api.dependencies import get_app_settings, get_recycle_bin, get_sweep_use_case
from propdiary.application.dto.responses import (
    DeletedItemResponse,
    ErrorResponse,
    RecycleBinListResponse,
    SweepResponse,
)
from propdiary.application.use_cases import SweepRecycleBinUseCase
from propdiary.config import Settings
from propdiary.core.entities.base import utc_now
from propdiary.core.services import RecycleBinService, SweepResult, parse_item_type

router = APIRouter(prefix="/api/recycle-bin", tags=["recycle-bin"])

_ITEM_ERRORS = {404: {"model": ErrorResponse}, 400: {"model": ErrorResponse}}


def _sweep_to_response(result: SweepResult) -> SweepResponse:
    return SweepResponse(total=result.total, purged=result.purged)


@router.get("", response_model=RecycleBinListResponse, responses={400: {"model": ErrorResponse}})
async def list_recycle_bin(
    search: str | None = None,
    item_type: str | None = None,
    service: RecycleBinService = Depends(get_recycle_bin),
    sweep: SweepRecycleBinUseCase = Depends(get_sweep_use_case),
    settings: Settings = Depends(get_app_settings),
) -> RecycleBinListResponse:
    """List soft-deleted records, most urgent first."""
    wanted = parse_item_type(item_type) if item_type else None
    now = utc_now()

    swept = await sweep.execute(now)
    items = await service.list_items(now, search=search, item_type=wanted)

    return RecycleBinListResponse(
        items=[DeletedItemResponse.model_validate(i.model_dump()) for i in items],
        total=len(items),
        retention_days=settings.retention.retention_days,
        swept=swept.total,
    )


@router.post("/sweep", response_model=SweepResponse)
async def sweep_recycle_bin(
    sweep: SweepRecycleBinUseCase = Depends(get_sweep_use_case),
) -> SweepResponse:
    """Permanently delete everything past the retention window."""
    return _sweep_to_response(await sweep.execute())


@router.post(
    "/{item_type}/{item_id}/restore",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_ITEM_ERRORS,
)
async def restore_item(
    item_type: str,
    item_id: str,
    service: RecycleBinService = Depends(get_recycle_bin),
) -> None:
    """Restore a record from the recycle bin."""
    await service.restore(parse_item_type(item_type), item_id)


@router.delete(
    "/{item_type}/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_ITEM_ERRORS,
)
async def purge_item(
    item_type: str,
    item_id: str,
    service: RecycleBinService = Depends(get_recycle_bin),
) -> None:
    """Delete a record forever, with its children."""
    await service.purge(parse_item_type(item_type), item_id)
