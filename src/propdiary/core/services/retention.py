"""
Recycle bin retention rules.

Soft-deleted records stay restorable for a fixed window after deletion,
then become eligible for permanent deletion.
"""

import math
from datetime import datetime, timedelta

from propdiary.core.entities.base import as_utc
from propdiary.core.entities.recycle_bin import RetentionUrgency

RETENTION_DAYS = 30

_DAY_SECONDS = 24 * 60 * 60


def days_remaining(
    deleted_at: datetime,
    now: datetime,
    retention_days: int = RETENTION_DAYS,
) -> int:
    """
    Whole days left before permanent deletion.

    Rounded up, so any fraction of a day still counts as one day; never
    negative.
    """
    elapsed = as_utc(now) - as_utc(deleted_at)
    left = timedelta(days=retention_days) - elapsed
    return max(0, math.ceil(left.total_seconds() / _DAY_SECONDS))


def is_expired(
    deleted_at: datetime,
    now: datetime,
    retention_days: int = RETENTION_DAYS,
) -> bool:
    """True once the full retention window has elapsed."""
    return as_utc(now) - as_utc(deleted_at) >= timedelta(days=retention_days)


def is_listed(
    deleted_at: datetime,
    now: datetime,
    retention_days: int = RETENTION_DAYS,
) -> bool:
    """Whether the item still shows in the recycle bin."""
    return days_remaining(deleted_at, now, retention_days) > 0


def urgency_bucket(days: int) -> RetentionUrgency:
    if days <= 3:
        return RetentionUrgency.CRITICAL
    if days <= 7:
        return RetentionUrgency.HIGH
    if days <= 14:
        return RetentionUrgency.MEDIUM
    return RetentionUrgency.LOW
