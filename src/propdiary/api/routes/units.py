"""
Unit management endpoints.
"""

from fastapi import APIRouter, Depends, status

from propdiary.api.dependencies import get_prop_store, get_tenancy_store_dep, get_unit_store_dep
from propdiary.application.dto.requests import CreateUnitRequest, UpdateUnitRequest
from propdiary.application.dto.responses import (
    ErrorResponse,
    TenancyListResponse,
    TenancyResponse,
    UnitListResponse,
    UnitResponse,
)
from propdiary.core.entities.base import utc_now
from propdiary.core.entities.property import Unit
from propdiary.core.exceptions import PropertyNotFoundError, UnitNotFoundError
from propdiary.core.interfaces.storage import IPropertyStore, ITenancyStore, IUnitStore

router = APIRouter(prefix="/api/units", tags=["units"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def unit_to_response(unit: Unit) -> UnitResponse:
    """Convert entity to response DTO."""
    return UnitResponse.model_validate(unit.model_dump())


async def _require(store: IUnitStore, unit_id: str) -> Unit:
    unit = await store.get(unit_id)
    if unit is None:
        raise UnitNotFoundError(unit_id)
    return unit


@router.post(
    "",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_NOT_FOUND,
)
async def create_unit(
    request: CreateUnitRequest,
    store: IUnitStore = Depends(get_unit_store_dep),
    property_store: IPropertyStore = Depends(get_prop_store),
) -> UnitResponse:
    """Create a unit in an existing property."""
    if await property_store.get(request.property_id) is None:
        raise PropertyNotFoundError(request.property_id)
    created = await store.create(Unit(**request.model_dump()))
    return unit_to_response(created)


@router.get("", response_model=UnitListResponse)
async def list_units(
    include_archived: bool = False,
    include_deleted: bool = False,
    store: IUnitStore = Depends(get_unit_store_dep),
) -> UnitListResponse:
    """List units across all properties."""
    units = await store.list(include_archived=include_archived, include_deleted=include_deleted)
    return UnitListResponse(units=[unit_to_response(u) for u in units], total=len(units))


@router.get("/{unit_id}", response_model=UnitResponse, responses=_NOT_FOUND)
async def get_unit(
    unit_id: str,
    store: IUnitStore = Depends(get_unit_store_dep),
) -> UnitResponse:
    """Get a unit by ID."""
    return unit_to_response(await _require(store, unit_id))


@router.put("/{unit_id}", response_model=UnitResponse, responses=_NOT_FOUND)
async def update_unit(
    unit_id: str,
    request: UpdateUnitRequest,
    store: IUnitStore = Depends(get_unit_store_dep),
) -> UnitResponse:
    """Update the fields present in the request body."""
    existing = await _require(store, unit_id)
    changes = request.changes()
    updated = await store.update(existing.model_copy(update=changes))
    return unit_to_response(updated)


@router.get("/{unit_id}/tenancies", response_model=TenancyListResponse, responses=_NOT_FOUND)
async def list_unit_tenancies(
    unit_id: str,
    store: IUnitStore = Depends(get_unit_store_dep),
    tenancy_store: ITenancyStore = Depends(get_tenancy_store_dep),
) -> TenancyListResponse:
    """List the tenancies of a unit (recycle bin excluded)."""
    await _require(store, unit_id)
    tenancies = await tenancy_store.list_by_unit(unit_id)
    return TenancyListResponse(
        tenancies=[TenancyResponse.model_validate(t.model_dump()) for t in tenancies],
        total=len(tenancies),
    )


@router.post("/{unit_id}/archive", response_model=UnitResponse, responses=_NOT_FOUND)
async def archive_unit(
    unit_id: str,
    store: IUnitStore = Depends(get_unit_store_dep),
) -> UnitResponse:
    """Archive a unit."""
    await _require(store, unit_id)
    await store.archive(unit_id)
    return unit_to_response(await _require(store, unit_id))


@router.post("/{unit_id}/restore", response_model=UnitResponse, responses=_NOT_FOUND)
async def restore_unit(
    unit_id: str,
    store: IUnitStore = Depends(get_unit_store_dep),
) -> UnitResponse:
    """Restore a unit from the recycle bin or the archive."""
    await _require(store, unit_id)
    await store.restore(unit_id)
    return unit_to_response(await _require(store, unit_id))


@router.post("/{unit_id}/trash", response_model=UnitResponse, responses=_NOT_FOUND)
async def trash_unit(
    unit_id: str,
    store: IUnitStore = Depends(get_unit_store_dep),
) -> UnitResponse:
    """Move a unit to the recycle bin."""
    await _require(store, unit_id)
    await store.soft_delete(unit_id, utc_now())
    return unit_to_response(await _require(store, unit_id))


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
async def delete_unit(
    unit_id: str,
    store: IUnitStore = Depends(get_unit_store_dep),
) -> None:
    """Permanently delete a unit and its tenancies."""
    if not await store.delete(unit_id):
        raise UnitNotFoundError(unit_id)
