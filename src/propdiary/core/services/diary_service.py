"""
Diary Service.

Recomputes tenancy reminders on demand and merges user annotations kept
in the overlay store. No background scheduler: every listing is a fresh
computation over the current records.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from propdiary.config import get_logger
from propdiary.core.entities.base import utc_now, utc_today
from propdiary.core.entities.diary import (
    DiaryAnnotation,
    DiaryEvent,
    DiaryEventStatus,
    DiaryEventType,
    DismissedEvent,
)
from propdiary.core.exceptions import DiaryEventNotFoundError
from propdiary.core.interfaces.storage import (
    IOverlayStore,
    IPropertyStore,
    ITenancyStore,
    IUnitStore,
)
from propdiary.core.services.reminder_rules import (
    DEFAULT_MONTHS_BEFORE,
    apply_annotations,
    derive_events,
    exclude_hidden,
    sort_events,
    urgent_subset,
)

logger = get_logger(__name__)

ANNOTATIONS_DOCUMENT = "diaryEventOverlay"
ARCHIVE_DOCUMENT = "archivedDiaryEvents"
DISMISSED_DOCUMENT = "dismissedDiaryEvents"

_M = TypeVar("_M", bound=BaseModel)


@dataclass
class DashboardDigest:
    """Urgent slice of the diary shown on the dashboard."""

    events: list[DiaryEvent] = field(default_factory=list)
    remaining: int = 0
    total_active: int = 0
    urgent_days: int = 7


class DiaryService:
    """
    Layer-pure service behind the diary and the dashboard reminders.

    Depends only on core interfaces. Overlay documents are read and
    written whole; mutations are serialized so concurrent requests do
    not lose each other's updates.
    """

    def __init__(
        self,
        tenancy_store: ITenancyStore,
        unit_store: IUnitStore,
        property_store: IPropertyStore,
        overlay_store: IOverlayStore,
        default_months_before: int = DEFAULT_MONTHS_BEFORE,
        dashboard_window_days: int = 30,
        dashboard_limit: int = 5,
        urgent_days: int = 7,
    ) -> None:
        self._tenancy_store = tenancy_store
        self._unit_store = unit_store
        self._property_store = property_store
        self._overlay_store = overlay_store
        self._default_months_before = default_months_before
        self._dashboard_window_days = dashboard_window_days
        self._dashboard_limit = dashboard_limit
        self._urgent_days = urgent_days
        self._write_lock = asyncio.Lock()

    # Computation

    async def compute_events(self, today: date | None = None) -> list[DiaryEvent]:
        """
        Derive, annotate and filter the active diary events.

        Args:
            today: Evaluation date (defaults to the current UTC date).

        Returns:
            Active events sorted soonest first.
        """
        today = today or utc_today()

        tenancies = await self._tenancy_store.list()
        units = await self._unit_store.list(include_archived=True, include_deleted=True)
        properties = await self._property_store.list(
            include_archived=True, include_deleted=True
        )

        derived = derive_events(
            tenancies,
            {u.id: u for u in units},
            {p.id: p for p in properties},
            today,
            default_months_before=self._default_months_before,
        )

        annotations = await self._load_entries(ANNOTATIONS_DOCUMENT, DiaryAnnotation)
        archived = await self._overlay_store.load(ARCHIVE_DOCUMENT)
        dismissed = await self._load_entries(DISMISSED_DOCUMENT, DismissedEvent)

        visible = exclude_hidden(
            apply_annotations(derived, annotations), archived.keys(), dismissed
        )
        return sort_events(visible)

    async def list_events(
        self,
        today: date | None = None,
        search: str | None = None,
        event_type: DiaryEventType | None = None,
    ) -> list[DiaryEvent]:
        """List active events, optionally filtered by free text and type."""
        events = await self.compute_events(today)
        return [
            e
            for e in events
            if e.matches_search(search)
            and (event_type is None or e.event_type == event_type)
        ]

    async def get_event(self, event_id: str, today: date | None = None) -> DiaryEvent:
        """Get one active event or raise DiaryEventNotFoundError."""
        for event in await self.compute_events(today):
            if event.id == event_id:
                return event
        raise DiaryEventNotFoundError(event_id)

    async def dashboard(self, today: date | None = None) -> DashboardDigest:
        """Most urgent events within the dashboard window."""
        today = today or utc_today()
        events = await self.compute_events(today)
        top, remaining = urgent_subset(
            events,
            today,
            window_days=self._dashboard_window_days,
            limit=self._dashboard_limit,
        )
        return DashboardDigest(
            events=top,
            remaining=remaining,
            total_active=len(events),
            urgent_days=self._urgent_days,
        )

    # Mutations

    async def update_event(
        self,
        event_id: str,
        status: DiaryEventStatus | None = None,
        comments: str | None = None,
        today: date | None = None,
        now: datetime | None = None,
    ) -> DiaryEvent:
        """
        Save status and/or comments for an active event.

        Creates the annotation on first save; refreshes updated_at on
        every save.
        """
        now = now or utc_now()
        event = await self.get_event(event_id, today)

        async with self._write_lock:
            entries = await self._overlay_store.load(ANNOTATIONS_DOCUMENT)
            existing = self._parse(
                ANNOTATIONS_DOCUMENT, event_id, entries.get(event_id), DiaryAnnotation
            )

            annotation = existing or DiaryAnnotation(
                id=event_id,
                status=event.status,
                comments=event.comments,
                created_at=now,
            )
            if status is not None:
                annotation.status = status
            if comments is not None:
                annotation.comments = comments
            annotation.updated_at = now

            entries[event_id] = annotation.model_dump(mode="json")
            await self._overlay_store.save(ANNOTATIONS_DOCUMENT, entries)

        logger.info(
            "diary_event_updated",
            event_id=event_id,
            status=annotation.status.value,
            created=existing is None,
        )
        return apply_annotations([event], {event_id: annotation})[0]

    async def archive_event(
        self,
        event_id: str,
        today: date | None = None,
        now: datetime | None = None,
    ) -> DiaryEvent:
        """Move an active event into the archive overlay."""
        now = now or utc_now()
        event = await self.get_event(event_id, today)
        archived = event.model_copy(update={"is_archived": True, "updated_at": now})

        async with self._write_lock:
            entries = await self._overlay_store.load(ARCHIVE_DOCUMENT)
            entries[event_id] = archived.model_dump(mode="json")
            await self._overlay_store.save(ARCHIVE_DOCUMENT, entries)

        logger.info("diary_event_archived", event_id=event_id)
        return archived

    async def list_archived(
        self,
        search: str | None = None,
        status: DiaryEventStatus | None = None,
    ) -> list[DiaryEvent]:
        """List archived event snapshots, soonest first."""
        archived = await self._load_entries(ARCHIVE_DOCUMENT, DiaryEvent)
        events = [
            e
            for e in archived.values()
            if e.matches_search(search) and (status is None or e.status == status)
        ]
        return sort_events(events)

    async def restore_event(self, event_id: str) -> None:
        """Remove an event from the archive so it can surface again."""
        async with self._write_lock:
            entries = await self._overlay_store.load(ARCHIVE_DOCUMENT)
            if event_id not in entries:
                raise DiaryEventNotFoundError(event_id, scope="archived")
            del entries[event_id]
            await self._overlay_store.save(ARCHIVE_DOCUMENT, entries)

        logger.info("diary_event_restored", event_id=event_id)

    async def delete_event(
        self,
        event_id: str,
        today: date | None = None,
        now: datetime | None = None,
    ) -> None:
        """
        Dismiss an active event.

        The dismissal holds for the event's current date only; if the
        tenancy date behind it changes, the reminder surfaces again.
        """
        now = now or utc_now()
        event = await self.get_event(event_id, today)
        marker = DismissedEvent(id=event_id, event_date=event.event_date, dismissed_at=now)

        async with self._write_lock:
            entries = await self._overlay_store.load(DISMISSED_DOCUMENT)
            entries[event_id] = marker.model_dump(mode="json")
            await self._overlay_store.save(DISMISSED_DOCUMENT, entries)

        logger.info(
            "diary_event_dismissed",
            event_id=event_id,
            event_date=event.event_date.isoformat(),
        )

    # Overlay parsing

    async def _load_entries(self, document: str, model: type[_M]) -> dict[str, _M]:
        raw = await self._overlay_store.load(document)
        parsed: dict[str, _M] = {}
        for key, value in raw.items():
            entry = self._parse(document, key, value, model)
            if entry is not None:
                parsed[key] = entry
        return parsed

    @staticmethod
    def _parse(
        document: str,
        key: str,
        value: dict[str, Any] | None,
        model: type[_M],
    ) -> _M | None:
        """Validate one overlay entry; a malformed entry is dropped, not fatal."""
        if value is None:
            return None
        try:
            return model.model_validate(value)
        except PydanticValidationError:
            logger.warning("overlay_entry_invalid", document=document, key=key)
            return None
