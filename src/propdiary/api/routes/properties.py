"""
Property management endpoints.
"""

from fastapi import APIRouter, Depends, status

from propdiary.api.dependencies import get_prop_store, get_tenancy_store_dep, get_unit_store_dep
from propdiary.api.routes.units import unit_to_response
from propdiary.application.dto.requests import CreatePropertyRequest, UpdatePropertyRequest
from propdiary.application.dto.responses import (
    ErrorResponse,
    PropertyListResponse,
    PropertyResponse,
    UnitListResponse,
)
from propdiary.core.entities.base import utc_now
from propdiary.core.entities.property import Property
from propdiary.core.exceptions import PropertyNotFoundError
from propdiary.core.interfaces.storage import IPropertyStore, ITenancyStore, IUnitStore
from propdiary.core.services import PropertyOccupancy, summarize_occupancy

router = APIRouter(prefix="/api/properties", tags=["properties"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def property_to_response(
    prop: Property,
    occupancy: PropertyOccupancy | None = None,
) -> PropertyResponse:
    """Convert entity to response DTO, with its unit and rent figures."""
    figures = occupancy or PropertyOccupancy()
    return PropertyResponse.model_validate(
        {
            **prop.model_dump(),
            "total_units": figures.total_units,
            "occupied_units": figures.occupied_units,
            "annual_rent": figures.annual_rent,
        }
    )


async def get_occupancy(
    unit_store: IUnitStore = Depends(get_unit_store_dep),
    tenancy_store: ITenancyStore = Depends(get_tenancy_store_dep),
) -> dict[str, PropertyOccupancy]:
    """Unit and rent figures for every property with active units."""
    return summarize_occupancy(await unit_store.list(), await tenancy_store.list())


async def _require(store: IPropertyStore, property_id: str) -> Property:
    prop = await store.get(property_id)
    if prop is None:
        raise PropertyNotFoundError(property_id)
    return prop


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_property(
    request: CreatePropertyRequest,
    store: IPropertyStore = Depends(get_prop_store),
) -> PropertyResponse:
    """Create a new property; it starts with no units."""
    created = await store.create(Property(**request.model_dump()))
    return property_to_response(created)


@router.get("", response_model=PropertyListResponse)
async def list_properties(
    include_archived: bool = False,
    include_deleted: bool = False,
    store: IPropertyStore = Depends(get_prop_store),
    occupancy: dict[str, PropertyOccupancy] = Depends(get_occupancy),
) -> PropertyListResponse:
    """List properties; archived and binned ones are hidden unless asked for."""
    properties = await store.list(
        include_archived=include_archived, include_deleted=include_deleted
    )
    return PropertyListResponse(
        properties=[property_to_response(p, occupancy.get(p.id)) for p in properties],
        total=len(properties),
    )


@router.get("/{property_id}", response_model=PropertyResponse, responses=_NOT_FOUND)
async def get_property(
    property_id: str,
    store: IPropertyStore = Depends(get_prop_store),
    occupancy: dict[str, PropertyOccupancy] = Depends(get_occupancy),
) -> PropertyResponse:
    """Get a property by ID."""
    return property_to_response(await _require(store, property_id), occupancy.get(property_id))


@router.put("/{property_id}", response_model=PropertyResponse, responses=_NOT_FOUND)
async def update_property(
    property_id: str,
    request: UpdatePropertyRequest,
    store: IPropertyStore = Depends(get_prop_store),
    occupancy: dict[str, PropertyOccupancy] = Depends(get_occupancy),
) -> PropertyResponse:
    """Update the fields present in the request body."""
    existing = await _require(store, property_id)
    changes = request.changes()
    updated = await store.update(existing.model_copy(update=changes))
    return property_to_response(updated, occupancy.get(updated.id))


@router.get("/{property_id}/units", response_model=UnitListResponse, responses=_NOT_FOUND)
async def list_property_units(
    property_id: str,
    store: IPropertyStore = Depends(get_prop_store),
    unit_store: IUnitStore = Depends(get_unit_store_dep),
) -> UnitListResponse:
    """List the units of a property (recycle bin excluded)."""
    await _require(store, property_id)
    units = await unit_store.list_by_property(property_id)
    return UnitListResponse(units=[unit_to_response(u) for u in units], total=len(units))


@router.post("/{property_id}/archive", response_model=PropertyResponse, responses=_NOT_FOUND)
async def archive_property(
    property_id: str,
    store: IPropertyStore = Depends(get_prop_store),
    occupancy: dict[str, PropertyOccupancy] = Depends(get_occupancy),
) -> PropertyResponse:
    """Archive a property. Its tenancies stop producing diary events."""
    await _require(store, property_id)
    await store.archive(property_id)
    return property_to_response(await _require(store, property_id), occupancy.get(property_id))


@router.post("/{property_id}/restore", response_model=PropertyResponse, responses=_NOT_FOUND)
async def restore_property(
    property_id: str,
    store: IPropertyStore = Depends(get_prop_store),
    occupancy: dict[str, PropertyOccupancy] = Depends(get_occupancy),
) -> PropertyResponse:
    """Restore a property from the recycle bin or the archive."""
    await _require(store, property_id)
    await store.restore(property_id)
    return property_to_response(await _require(store, property_id), occupancy.get(property_id))


@router.post("/{property_id}/trash", response_model=PropertyResponse, responses=_NOT_FOUND)
async def trash_property(
    property_id: str,
    store: IPropertyStore = Depends(get_prop_store),
    occupancy: dict[str, PropertyOccupancy] = Depends(get_occupancy),
) -> PropertyResponse:
    """Move a property to the recycle bin."""
    await _require(store, property_id)
    await store.soft_delete(property_id, utc_now())
    return property_to_response(await _require(store, property_id), occupancy.get(property_id))


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
)
async def delete_property(
    property_id: str,
    store: IPropertyStore = Depends(get_prop_store),
) -> None:
    """Permanently delete a property with its units and tenancies."""
    if not await store.delete(property_id):
        raise PropertyNotFoundError(property_id)
