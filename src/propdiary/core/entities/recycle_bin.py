"""Recycle bin listing entities."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class DeletedItemType(str, Enum):
    """Record types that can sit in the recycle bin."""

    PROPERTY = "property"
    UNIT = "unit"
    TENANCY = "tenancy"


class RetentionUrgency(str, Enum):
    """Display bucket for days left before permanent deletion."""

    CRITICAL = "critical"  # <= 3 days
    HIGH = "high"  # <= 7 days
    MEDIUM = "medium"  # <= 14 days
    LOW = "low"


class DeletedItem(BaseModel):
    """A soft-deleted record as shown in the recycle bin."""

    id: str
    item_type: DeletedItemType
    name: str
    description: str = ""
    deleted_at: datetime
    days_remaining: int
    urgency: RetentionUrgency

    def matches_search(self, query: str | None) -> bool:
        if not query:
            return True
        needle = query.lower()
        return needle in self.name.lower() or needle in self.description.lower()
