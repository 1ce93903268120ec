"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from propdiary.core.entities.diary import DiaryEventStatus, DiaryEventType
from propdiary.core.entities.property import PropertyStatus, Tenure, UnitStatus
from propdiary.core.entities.recycle_bin import DeletedItemType, RetentionUrgency
from propdiary.core.entities.tenancy import (
    BreakType,
    ReminderSettings,
    RentReviewType,
    TenancyStatus,
)

# --- Records ---


class RecordResponse(BaseModel):
    """Fields shared by every record response."""

    id: str
    is_archived: bool = False
    is_deleted: bool = False
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class PropertyResponse(RecordResponse):
    """Property response."""

    name: str
    address: str = ""
    property_type: str
    status: PropertyStatus
    tenure: Tenure | None = None
    description: str | None = None
    purchase_price: float | None = None
    current_value: float | None = None
    property_manager: str | None = None
    total_units: int = Field(default=0, description="Active units")
    occupied_units: int = Field(default=0, description="Active units let to a tenant")
    annual_rent: float = Field(default=0.0, description="Twelve months of active tenancy rent")


class PropertyListResponse(BaseModel):
    properties: list[PropertyResponse]
    total: int


class UnitResponse(RecordResponse):
    """Unit response."""

    property_id: str
    unit_number: str
    unit_type: str
    floor_number: int | None = None
    size_sqft: float | None = None
    rent_amount: float | None = None
    status: UnitStatus


class UnitListResponse(BaseModel):
    units: list[UnitResponse]
    total: int


class TenancyResponse(RecordResponse):
    """Tenancy response with its reminder settings."""

    unit_id: str
    tenant_name: str
    tenant_email: str | None = None
    tenant_phone: str | None = None
    lease_start_date: date
    lease_end_date: date
    monthly_rent: float
    security_deposit: float | None = None
    status: TenancyStatus
    notes: str | None = None
    break_date: date | None = None
    break_type: BreakType | None = None
    rent_review_date: date | None = None
    rent_review_type: RentReviewType | None = None
    reminder_settings: ReminderSettings


class TenancyListResponse(BaseModel):
    tenancies: list[TenancyResponse]
    total: int


# --- Diary ---


class DiaryEventResponse(BaseModel):
    """A diary event with its annotation merged in."""

    id: str = Field(..., description="Stable id: <event type>_<tenancy id>")
    event_type: DiaryEventType
    event_date: date
    title: str
    description: str
    tenancy_id: str
    unit_id: str | None = None
    property_id: str | None = None
    property_name: str
    unit_number: str
    tenant_name: str
    monthly_rent: float
    comments: str
    status: DiaryEventStatus
    is_archived: bool
    created_at: datetime
    updated_at: datetime
    days_until: int = Field(..., description="Days from today to the event date")
    is_urgent: bool = Field(default=False, description="Due within the urgent window")


class DiaryEventListResponse(BaseModel):
    events: list[DiaryEventResponse]
    total: int


class UrgentDiaryResponse(BaseModel):
    """Dashboard slice of the diary."""

    events: list[DiaryEventResponse]
    remaining: int = Field(..., description="Further in-window events not shown")
    total_active: int = Field(..., description="All active diary events")


# --- Recycle bin ---


class DeletedItemResponse(BaseModel):
    """A record in the recycle bin."""

    id: str
    item_type: DeletedItemType
    name: str
    description: str
    deleted_at: datetime
    days_remaining: int = Field(..., description="Whole days before permanent deletion")
    urgency: RetentionUrgency


class RecycleBinListResponse(BaseModel):
    items: list[DeletedItemResponse]
    total: int
    retention_days: int
    swept: int = Field(default=0, description="Expired records purged before listing")


class SweepResponse(BaseModel):
    """Outcome of a retention sweep."""

    total: int
    purged: dict[str, list[str]]


# --- Dashboard ---


class PortfolioStatsResponse(BaseModel):
    """Portfolio totals over active records."""

    total_properties: int
    total_units: int
    occupied_units: int
    vacant_units: int
    active_tenancies: int
    occupancy_rate: float = Field(..., description="Occupied share of active units, percent")
    monthly_revenue: float = Field(..., description="Sum of active tenancies' monthly rent")
    portfolio_value: float = Field(..., description="Sum of active properties' current value")


class DashboardResponse(BaseModel):
    stats: PortfolioStatsResponse
    urgent: UrgentDiaryResponse


# --- System ---


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: str = "unknown"


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. TENANCY_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
