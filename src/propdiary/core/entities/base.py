"""Shared pieces for record entities: timestamps, archiving and tombstones."""

from datetime import UTC, date, datetime
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def utc_today() -> date:
    """Current calendar date in UTC, the clock every diary evaluation uses."""
    return utc_now().date()


def new_id() -> str:
    return uuid4().hex


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class RecordBase(BaseModel):
    """
    Base for Property, Unit and Tenancy records.

    A record can be archived (hidden, kept indefinitely) or soft-deleted
    (moved to the recycle bin until restored or purged).
    """

    id: str = Field(default_factory=new_id)
    is_archived: bool = False
    is_deleted: bool = False
    deleted_at: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("deleted_at", "created_at", "updated_at")
    @classmethod
    def _ensure_utc(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None

    @model_validator(mode="after")
    def _tombstone_has_timestamp(self) -> "RecordBase":
        if self.is_deleted and self.deleted_at is None:
            raise ValueError("deleted_at is required when is_deleted is set")
        return self

    @property
    def is_active(self) -> bool:
        """Visible in normal listings (neither archived nor in the bin)."""
        return not self.is_archived and not self.is_deleted

    def mark_deleted(self, when: datetime | None = None) -> None:
        """Move the record to the recycle bin."""
        self.deleted_at = as_utc(when) if when else utc_now()
        self.is_deleted = True
        self.updated_at = utc_now()

    def clear_deleted(self) -> None:
        """Take the record back out of the recycle bin."""
        self.is_deleted = False
        self.deleted_at = None
        self.updated_at = utc_now()
