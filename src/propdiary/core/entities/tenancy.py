"""Tenancy entity with embedded reminder settings."""

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field

from propdiary.core.entities.base import RecordBase


class TenancyStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class BreakType(str, Enum):
    MUTUAL = "mutual"
    LANDLORD_ONLY = "landlord_only"
    TENANT_ONLY = "tenant_only"


class RentReviewType(str, Enum):
    FIXED = "fixed"
    INDEXED_RPI = "indexed_rpi"
    INDEXED_CPI = "indexed_cpi"
    OPEN_MARKET = "open_market"
    UPWARDS_ONLY_OPEN_MARKET = "upwards_only_open_market"


class ReminderRule(BaseModel):
    """Per-date "remind me N months before" setting."""

    enabled: bool = False
    months_before: int = Field(default=3, ge=0)


class ReminderSettings(BaseModel):
    """The three reminder rules carried by every tenancy."""

    lease_expiry: ReminderRule = Field(default_factory=ReminderRule)
    rent_review: ReminderRule = Field(default_factory=ReminderRule)
    tenancy_break: ReminderRule = Field(default_factory=ReminderRule)


class Tenancy(RecordBase):
    """
    A lease of one unit to one tenant.

    Lease end, rent review and break dates drive the diary reminders.
    """

    unit_id: str
    tenant_name: str
    tenant_email: str | None = None
    tenant_phone: str | None = None
    lease_start_date: date
    lease_end_date: date
    monthly_rent: float = Field(default=0.0, ge=0)
    security_deposit: float | None = None
    status: TenancyStatus = TenancyStatus.ACTIVE
    notes: str | None = None

    break_date: date | None = None
    break_type: BreakType | None = None
    rent_review_date: date | None = None
    rent_review_type: RentReviewType | None = None

    reminder_settings: ReminderSettings = Field(default_factory=ReminderSettings)
