"""
Tenancy management endpoints.

Reminder settings travel with the tenancy; changing a tracked date or a
rule is picked up by the next diary listing.
"""

from fastapi import APIRouter, Depends, status

from propdiary.api.dependencies import get_tenancy_store_dep, get_unit_store_dep
from propdiary.application.dto.requests import CreateTenancyRequest, UpdateTenancyRequest
from propdiary.application.dto.responses import (
    ErrorResponse,
    TenancyListResponse,
    TenancyResponse,
)
from propdiary.core.entities.base import utc_now
from propdiary.core.entities.tenancy import Tenancy
from propdiary.core.exceptions import TenancyNotFoundError, UnitNotFoundError, ValidationError
from propdiary.core.interfaces.storage import ITenancyStore, IUnitStore

router = APIRouter(prefix="/api/tenancies", tags=["tenancies"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def tenancy_to_response(tenancy: Tenancy) -> TenancyResponse:
    """Convert entity to response DTO."""
    return TenancyResponse.model_validate(tenancy.model_dump())


async def _require(store: ITenancyStore, tenancy_id: str) -> Tenancy:
    tenancy = await store.get(tenancy_id)
    if tenancy is None:
        raise TenancyNotFoundError(tenancy_id)
    return tenancy


@router.post(
    "",
    response_model=TenancyResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_NOT_FOUND,
)
async def create_tenancy(
    request: CreateTenancyRequest,
    store: ITenancyStore = Depends(get_tenancy_store_dep),
    unit_store: IUnitStore = Depends(get_unit_store_dep),
) -> TenancyResponse:
    """Create a tenancy on an existing unit; the unit becomes occupied."""
    if await unit_store.get(request.unit_id) is None:
        raise UnitNotFoundError(request.unit_id)
    created = await store.create(Tenancy(**request.model_dump()))
    return tenancy_to_response(created)


@router.get("", response_model=TenancyListResponse)
async def list_tenancies(
    include_archived: bool = False,
    include_deleted: bool = False,
    store: ITenancyStore = Depends(get_tenancy_store_dep),
) -> TenancyListResponse:
    """List tenancies, soonest lease end first."""
    tenancies = await store.list(
        include_archived=include_archived, include_deleted=include_deleted
    )
    return TenancyListResponse(
        tenancies=[tenancy_to_response(t) for t in tenancies],
        total=len(tenancies),
    )


@router.get("/{tenancy_id}", response_model=TenancyResponse, responses=_NOT_FOUND)
async def get_tenancy(
    tenancy_id: str,
    store: ITenancyStore = Depends(get_tenancy_store_dep),
) -> TenancyResponse:
    """Get a tenancy by ID."""
    return tenancy_to_response(await _require(store, tenancy_id))


@router.put(
    "/{tenancy_id}",
    response_model=TenancyResponse,
    responses={**_NOT_FOUND, 400: {"model": ErrorResponse}},
)
async def update_tenancy(
    tenancy_id: str,
    request: UpdateTenancyRequest,
    store: ITenancyStore = Depends(get_tenancy_store_dep),
) -> TenancyResponse:
    """Update the fields present in the request body."""
    existing = await _require(store, tenancy_id)
    changes = request.changes()
    if "reminder_settings" in changes:
        changes["reminder_settings"] = request.reminder_settings

    candidate = existing.model_copy(update=changes)
    if candidate.lease_end_date < candidate.lease_start_date:
        raise ValidationError(
            "lease_end_date",
            "must not be before lease_start_date",
            candidate.lease_end_date,
        )

    updated = await store.update(candidate)
    return tenancy_to_response(updated)


@router.post("/{tenancy_id}/archive", response_model=TenancyResponse, responses=_NOT_FOUND)
async def archive_tenancy(
    tenancy_id: str,
    store: ITenancyStore = Depends(get_tenancy_store_dep),
) -> TenancyResponse:
    """Archive a tenancy: it is terminated and its unit becomes vacant."""
    await _require(store, tenancy_id)
    await store.archive(tenancy_id)
    return tenancy_to_response(await _require(store, tenancy_id))


@router.post("/{tenancy_id}/restore", response_model=TenancyResponse, responses=_NOT_FOUND)
async def restore_tenancy(
    tenancy_id: str,
    store: ITenancyStore = Depends(get_tenancy_store_dep),
) -> TenancyResponse:
    """Restore a tenancy: it is active again and its unit occupied."""
    await _require(store, tenancy_id)
    await store.restore(tenancy_id)
    return tenancy_to_response(await _require(store, tenancy_id))


@router.post("/{tenancy_id}/trash", response_model=TenancyResponse, responses=_NOT_FOUND)
async def trash_tenancy(
    tenancy_id: str,
    store: ITenancyStore = Depends(get_tenancy_store_dep),
) -> TenancyResponse:
    """Move a tenancy to the recycle bin."""
    await _require(store, tenancy_id)
    await store.soft_delete(tenancy_id, utc_now())
    return tenancy_to_response(await _require(store, tenancy_id))


@router.delete("/{tenancy_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
async def delete_tenancy(
    tenancy_id: str,
    store: ITenancyStore = Depends(get_tenancy_store_dep),
) -> None:
    """Permanently delete a tenancy; its unit becomes vacant."""
    if not await store.delete(tenancy_id):
        raise TenancyNotFoundError(tenancy_id)
