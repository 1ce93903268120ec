"""
Dependency injection container for FastAPI.

Provides stores, services and use cases to route handlers.
"""

from functools import lru_cache

from propdiary.application.services import get_diary_service, get_recycle_bin_service
from propdiary.application.use_cases import BuildDashboardUseCase, SweepRecycleBinUseCase
from propdiary.config import Settings, get_settings
from propdiary.core.services import DiaryService, RecycleBinService
from propdiary.infrastructure.storage.sqlite import (
    SQLitePropertyStore,
    SQLiteTenancyStore,
    SQLiteUnitStore,
    get_property_store,
    get_tenancy_store,
    get_unit_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Store dependencies
async def get_prop_store() -> SQLitePropertyStore:
    """Get property store."""
    return await get_property_store()


async def get_unit_store_dep() -> SQLiteUnitStore:
    """Get unit store."""
    return await get_unit_store()


async def get_tenancy_store_dep() -> SQLiteTenancyStore:
    """Get tenancy store."""
    return await get_tenancy_store()


# Service dependencies
async def get_diary() -> DiaryService:
    """Get diary service."""
    return await get_diary_service()


async def get_recycle_bin() -> RecycleBinService:
    """Get recycle bin service."""
    return await get_recycle_bin_service()


# Use case dependencies
async def get_sweep_use_case() -> SweepRecycleBinUseCase:
    """Get sweep use case bound to the recycle bin service."""
    return SweepRecycleBinUseCase(await get_recycle_bin_service())


async def get_dashboard_use_case() -> BuildDashboardUseCase:
    """Get dashboard use case."""
    return BuildDashboardUseCase(diary_service=await get_diary_service())
