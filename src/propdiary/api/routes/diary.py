"""
Diary endpoints.

Events are recomputed from tenancies on every request; only status,
comments, archive and dismissal markers are stored.
"""

from datetime import date

from fastapi import APIRouter, Depends, status

from propdiary.api.dependencies import get_app_settings, get_diary
from propdiary.application.dto.requests import UpdateDiaryEventRequest
from propdiary.application.dto.responses import (
    DiaryEventListResponse,
    DiaryEventResponse,
    ErrorResponse,
    UrgentDiaryResponse,
)
from propdiary.config import Settings
from propdiary.core.entities.base import utc_today
from propdiary.core.entities.diary import DiaryEvent, DiaryEventStatus, DiaryEventType
from propdiary.core.services import DashboardDigest, DiaryService

router = APIRouter(prefix="/api/diary", tags=["diary"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def event_to_response(event: DiaryEvent, today: date, urgent_days: int) -> DiaryEventResponse:
    """Convert entity to response DTO."""
    days = event.days_until(today)
    return DiaryEventResponse(
        **event.model_dump(),
        days_until=days,
        is_urgent=days <= urgent_days,
    )


def digest_to_response(digest: DashboardDigest, today: date) -> UrgentDiaryResponse:
    return UrgentDiaryResponse(
        events=[event_to_response(e, today, digest.urgent_days) for e in digest.events],
        remaining=digest.remaining,
        total_active=digest.total_active,
    )


@router.get("", response_model=DiaryEventListResponse)
async def list_events(
    search: str | None = None,
    event_type: DiaryEventType | None = None,
    service: DiaryService = Depends(get_diary),
    settings: Settings = Depends(get_app_settings),
) -> DiaryEventListResponse:
    """List active diary events, soonest first."""
    today = utc_today()
    events = await service.list_events(today, search=search, event_type=event_type)
    return DiaryEventListResponse(
        events=[event_to_response(e, today, settings.diary.urgent_days) for e in events],
        total=len(events),
    )


@router.get("/dashboard", response_model=UrgentDiaryResponse)
async def urgent_events(
    service: DiaryService = Depends(get_diary),
) -> UrgentDiaryResponse:
    """Most urgent events due within the dashboard window."""
    today = utc_today()
    return digest_to_response(await service.dashboard(today), today)


@router.get("/archived", response_model=DiaryEventListResponse)
async def list_archived_events(
    search: str | None = None,
    status: DiaryEventStatus | None = None,
    service: DiaryService = Depends(get_diary),
    settings: Settings = Depends(get_app_settings),
) -> DiaryEventListResponse:
    """List archived event snapshots."""
    today = utc_today()
    events = await service.list_archived(search=search, status=status)
    return DiaryEventListResponse(
        events=[event_to_response(e, today, settings.diary.urgent_days) for e in events],
        total=len(events),
    )


@router.get("/{event_id}", response_model=DiaryEventResponse, responses=_NOT_FOUND)
async def get_event(
    event_id: str,
    service: DiaryService = Depends(get_diary),
    settings: Settings = Depends(get_app_settings),
) -> DiaryEventResponse:
    """Get one active event."""
    today = utc_today()
    event = await service.get_event(event_id, today)
    return event_to_response(event, today, settings.diary.urgent_days)


@router.patch(
    "/{event_id}",
    response_model=DiaryEventResponse,
    responses={**_NOT_FOUND, 422: {"model": ErrorResponse}},
)
async def update_event(
    event_id: str,
    request: UpdateDiaryEventRequest,
    service: DiaryService = Depends(get_diary),
    settings: Settings = Depends(get_app_settings),
) -> DiaryEventResponse:
    """Save status and/or comments on an active event."""
    today = utc_today()
    event = await service.update_event(
        event_id,
        status=request.status,
        comments=request.comments,
        today=today,
    )
    return event_to_response(event, today, settings.diary.urgent_days)


@router.post("/{event_id}/archive", response_model=DiaryEventResponse, responses=_NOT_FOUND)
async def archive_event(
    event_id: str,
    service: DiaryService = Depends(get_diary),
    settings: Settings = Depends(get_app_settings),
) -> DiaryEventResponse:
    """Archive an active event until it is restored."""
    today = utc_today()
    event = await service.archive_event(event_id, today)
    return event_to_response(event, today, settings.diary.urgent_days)


@router.post(
    "/{event_id}/restore",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
)
async def restore_event(
    event_id: str,
    service: DiaryService = Depends(get_diary),
) -> None:
    """Take an event out of the archive; it shows again while still due."""
    await service.restore_event(event_id)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_NOT_FOUND)
async def delete_event(
    event_id: str,
    service: DiaryService = Depends(get_diary),
) -> None:
    """Dismiss an event for its current date."""
    await service.delete_event(event_id, utc_today())
