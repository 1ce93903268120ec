"""
Diary event entities.

Diary events are derived from tenancies on every computation. Only the
user annotations (status, comments) and the archive / dismissal markers
are persisted, keyed by the deterministic event id.
"""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from propdiary.core.entities.base import as_utc, utc_now


class DiaryEventType(str, Enum):
    """Tenancy date that generates a reminder."""

    LEASE_EXPIRY = "lease_expiry"
    RENT_REVIEW = "rent_review"
    TENANCY_BREAK = "tenancy_break"


class DiaryEventStatus(str, Enum):
    """User-tracked negotiation status of a diary event."""

    PENDING = "pending"
    VACATING = "vacating"
    IN_TALKS_DIRECTLY = "in_talks_directly"
    IN_NEGOTIATIONS = "in_negotiations"
    IN_LEGALS = "in_legals"


def make_event_id(event_type: DiaryEventType, tenancy_id: str) -> str:
    """Stable identity of the event a tenancy emits for one rule type."""
    return f"{event_type.value}_{tenancy_id}"


class DiaryEvent(BaseModel):
    """
    A reminder that is currently due to surface to the user.

    Property, unit and tenant fields are a snapshot taken at computation
    time; status and comments come from the annotation overlay.
    """

    id: str
    event_type: DiaryEventType
    event_date: date
    title: str
    description: str = ""

    tenancy_id: str
    unit_id: str | None = None
    property_id: str | None = None
    property_name: str
    unit_number: str
    tenant_name: str
    monthly_rent: float = 0.0

    comments: str = ""
    status: DiaryEventStatus = DiaryEventStatus.PENDING
    is_archived: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    def days_until(self, today: date) -> int:
        """Whole days from today to the event (negative once passed)."""
        return (self.event_date - today).days

    def matches_search(self, query: str | None) -> bool:
        """Case-insensitive match over title, description, property and tenant."""
        if not query:
            return True
        needle = query.lower()
        haystacks = (self.title, self.description, self.property_name, self.tenant_name)
        return any(needle in h.lower() for h in haystacks)


class DiaryAnnotation(BaseModel):
    """User-entered overlay for a diary event."""

    id: str
    status: DiaryEventStatus = DiaryEventStatus.PENDING
    comments: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class DismissedEvent(BaseModel):
    """
    Suppression marker written by deleting a diary event.

    Bound to the event date it was dismissed at, so a changed tenancy date
    brings the reminder back.
    """

    id: str
    event_date: date
    dismissed_at: datetime = Field(default_factory=utc_now)

    def suppresses(self, event: DiaryEvent) -> bool:
        return self.id == event.id and self.event_date == event.event_date
