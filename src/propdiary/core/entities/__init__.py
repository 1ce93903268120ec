"""Core domain entities."""

from propdiary.core.entities.base import RecordBase, utc_now, utc_today
from propdiary.core.entities.diary import (
    DiaryAnnotation,
    DiaryEvent,
    DiaryEventStatus,
    DiaryEventType,
    DismissedEvent,
    make_event_id,
)
from propdiary.core.entities.property import (
    Property,
    PropertyStatus,
    Tenure,
    Unit,
    UnitStatus,
)
from propdiary.core.entities.recycle_bin import (
    DeletedItem,
    DeletedItemType,
    RetentionUrgency,
)
from propdiary.core.entities.tenancy import (
    BreakType,
    ReminderRule,
    ReminderSettings,
    RentReviewType,
    Tenancy,
    TenancyStatus,
)

__all__ = [
    # Record base
    "RecordBase",
    "utc_now",
    "utc_today",
    # Property entities
    "Property",
    "PropertyStatus",
    "Tenure",
    "Unit",
    "UnitStatus",
    # Tenancy entities
    "Tenancy",
    "TenancyStatus",
    "BreakType",
    "RentReviewType",
    "ReminderRule",
    "ReminderSettings",
    # Diary entities
    "DiaryEvent",
    "DiaryEventType",
    "DiaryEventStatus",
    "DiaryAnnotation",
    "DismissedEvent",
    "make_event_id",
    # Recycle bin entities
    "DeletedItem",
    "DeletedItemType",
    "RetentionUrgency",
]
