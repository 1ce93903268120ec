"""
Core business logic services.

Layer-pure services that depend only on:
- propdiary/core/entities/*
- propdiary/core/interfaces/*
- propdiary/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from propdiary.core.services.diary_service import DashboardDigest, DiaryService
from propdiary.core.services.occupancy import PropertyOccupancy, summarize_occupancy
from propdiary.core.services.recycle_bin_service import (
    RecycleBinService,
    SweepResult,
    parse_item_type,
)

__all__ = [
    # Diary
    "DiaryService",
    "DashboardDigest",
    # Recycle Bin
    "RecycleBinService",
    "SweepResult",
    "parse_item_type",
    # Occupancy
    "PropertyOccupancy",
    "summarize_occupancy",
]
