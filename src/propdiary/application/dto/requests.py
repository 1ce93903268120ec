"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date
from typing import ClassVar

from pydantic import BaseModel, Field, model_validator

from propdiary.core.entities.diary import DiaryEventStatus
from propdiary.core.entities.property import PropertyStatus, Tenure, UnitStatus
from propdiary.core.entities.tenancy import (
    BreakType,
    ReminderSettings,
    RentReviewType,
    TenancyStatus,
)


class PartialUpdateRequest(BaseModel):
    """
    Base for partial updates.

    Omitted fields are left unchanged. Fields listed in `non_nullable`
    back required record columns and may be omitted but not sent as null.
    """

    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _required_fields_not_null(self) -> "PartialUpdateRequest":
        nulled = [
            name
            for name in self.non_nullable
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self

    def changes(self) -> dict:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class CreatePropertyRequest(BaseModel):
    """Request to create a property."""

    name: str = Field(..., min_length=1, description="Property name", examples=["Riverside House"])
    address: str = Field(default="", description="Postal address")
    property_type: str = Field(
        default="commercial",
        description="Free-text property type",
        examples=["commercial", "retail", "industrial"],
    )
    status: PropertyStatus = PropertyStatus.ACTIVE
    tenure: Tenure | None = None
    description: str | None = None
    purchase_price: float | None = Field(default=None, ge=0)
    current_value: float | None = Field(default=None, ge=0)
    property_manager: str | None = None


class UpdatePropertyRequest(PartialUpdateRequest):
    """Partial update of a property. Omitted fields are left unchanged."""

    non_nullable: ClassVar[tuple[str, ...]] = ("name", "address", "property_type", "status")

    name: str | None = Field(default=None, min_length=1)
    address: str | None = None
    property_type: str | None = None
    status: PropertyStatus | None = None
    tenure: Tenure | None = None
    description: str | None = None
    purchase_price: float | None = Field(default=None, ge=0)
    current_value: float | None = Field(default=None, ge=0)
    property_manager: str | None = None


class CreateUnitRequest(BaseModel):
    """Request to create a unit within a property."""

    property_id: str = Field(..., description="Owning property ID")
    unit_number: str = Field(..., min_length=1, examples=["G01", "2A"])
    unit_type: str = Field(default="office", examples=["office", "retail", "warehouse"])
    floor_number: int | None = None
    size_sqft: float | None = Field(default=None, ge=0)
    rent_amount: float | None = Field(default=None, ge=0)
    status: UnitStatus = UnitStatus.VACANT


class UpdateUnitRequest(PartialUpdateRequest):
    """Partial update of a unit."""

    non_nullable: ClassVar[tuple[str, ...]] = ("unit_number", "unit_type", "status")

    unit_number: str | None = Field(default=None, min_length=1)
    unit_type: str | None = None
    floor_number: int | None = None
    size_sqft: float | None = Field(default=None, ge=0)
    rent_amount: float | None = Field(default=None, ge=0)
    status: UnitStatus | None = None


class CreateTenancyRequest(BaseModel):
    """Request to create a tenancy. The unit becomes occupied."""

    unit_id: str = Field(..., description="Let unit ID")
    tenant_name: str = Field(..., min_length=1, examples=["Acme Ltd"])
    tenant_email: str | None = None
    tenant_phone: str | None = None
    lease_start_date: date
    lease_end_date: date
    monthly_rent: float = Field(default=0.0, ge=0)
    security_deposit: float | None = Field(default=None, ge=0)
    status: TenancyStatus = TenancyStatus.ACTIVE
    notes: str | None = None
    break_date: date | None = None
    break_type: BreakType | None = None
    rent_review_date: date | None = None
    rent_review_type: RentReviewType | None = None
    reminder_settings: ReminderSettings = Field(
        default_factory=ReminderSettings,
        description="Per-date reminder rules (lease expiry, rent review, break)",
    )

    @model_validator(mode="after")
    def _lease_dates_ordered(self) -> "CreateTenancyRequest":
        if self.lease_end_date < self.lease_start_date:
            raise ValueError("lease_end_date must not be before lease_start_date")
        return self


class UpdateTenancyRequest(PartialUpdateRequest):
    """Partial update of a tenancy, reminder settings included."""

    non_nullable: ClassVar[tuple[str, ...]] = (
        "tenant_name",
        "lease_start_date",
        "lease_end_date",
        "monthly_rent",
        "status",
        "reminder_settings",
    )

    tenant_name: str | None = Field(default=None, min_length=1)
    tenant_email: str | None = None
    tenant_phone: str | None = None
    lease_start_date: date | None = None
    lease_end_date: date | None = None
    monthly_rent: float | None = Field(default=None, ge=0)
    security_deposit: float | None = Field(default=None, ge=0)
    status: TenancyStatus | None = None
    notes: str | None = None
    break_date: date | None = None
    break_type: BreakType | None = None
    rent_review_date: date | None = None
    rent_review_type: RentReviewType | None = None
    reminder_settings: ReminderSettings | None = None


class UpdateDiaryEventRequest(BaseModel):
    """Save status and/or comments on a diary event."""

    status: DiaryEventStatus | None = Field(
        default=None,
        description="Negotiation status, e.g. pending or in_legals",
    )
    comments: str | None = Field(default=None, max_length=5000)

    @model_validator(mode="after")
    def _something_to_save(self) -> "UpdateDiaryEventRequest":
        if self.status is None and self.comments is None:
            raise ValueError("Provide status and/or comments")
        return self
