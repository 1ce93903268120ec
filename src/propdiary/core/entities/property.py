"""Property and unit record entities."""

from enum import Enum

from propdiary.core.entities.base import RecordBase


class PropertyStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Tenure(str, Enum):
    FREEHOLD = "freehold"
    LEASEHOLD = "leasehold"


class UnitStatus(str, Enum):
    VACANT = "vacant"
    OCCUPIED = "occupied"


class Property(RecordBase):
    """A managed building or site. Owns zero or more units."""

    name: str
    address: str = ""
    property_type: str = "commercial"
    status: PropertyStatus = PropertyStatus.ACTIVE
    tenure: Tenure | None = None
    description: str | None = None
    purchase_price: float | None = None
    current_value: float | None = None
    property_manager: str | None = None


class Unit(RecordBase):
    """A lettable unit within a property."""

    property_id: str
    unit_number: str
    unit_type: str = "office"
    floor_number: int | None = None
    size_sqft: float | None = None
    rent_amount: float | None = None
    status: UnitStatus = UnitStatus.VACANT
