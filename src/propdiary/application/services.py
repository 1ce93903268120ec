"""
Service factory functions for dependency injection.

This module wires the SQLite store implementations to the core services.
Use cases and API dependencies import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from propdiary.config import get_settings
from propdiary.core.services import DiaryService, RecycleBinService

if TYPE_CHECKING:
    from propdiary.core.interfaces import (
        IOverlayStore,
        IPropertyStore,
        ITenancyStore,
        IUnitStore,
    )


# Singleton service instances
_diary_service: DiaryService | None = None
_recycle_bin_service: RecycleBinService | None = None


async def get_diary_service(
    tenancy_store: "ITenancyStore | None" = None,
    unit_store: "IUnitStore | None" = None,
    property_store: "IPropertyStore | None" = None,
    overlay_store: "IOverlayStore | None" = None,
) -> DiaryService:
    """
    Get or create DiaryService instance.

    Overrides bypass the singleton so tests can inject their own stores.

    Args:
        tenancy_store: Optional tenancy store override
        unit_store: Optional unit store override
        property_store: Optional property store override
        overlay_store: Optional overlay store override

    Returns:
        Configured DiaryService
    """
    global _diary_service

    overridden = any(
        s is not None for s in (tenancy_store, unit_store, property_store, overlay_store)
    )
    if _diary_service is not None and not overridden:
        return _diary_service

    # Lazy import infrastructure
    from propdiary.infrastructure.storage.sqlite import (
        get_overlay_store,
        get_property_store,
        get_tenancy_store,
        get_unit_store,
    )

    settings = get_settings()
    service = DiaryService(
        tenancy_store=tenancy_store or await get_tenancy_store(),
        unit_store=unit_store or await get_unit_store(),
        property_store=property_store or await get_property_store(),
        overlay_store=overlay_store or await get_overlay_store(),
        default_months_before=settings.diary.default_months_before,
        dashboard_window_days=settings.diary.dashboard_window_days,
        dashboard_limit=settings.diary.dashboard_limit,
        urgent_days=settings.diary.urgent_days,
    )

    if not overridden:
        _diary_service = service

    return service


async def get_recycle_bin_service(
    property_store: "IPropertyStore | None" = None,
    unit_store: "IUnitStore | None" = None,
    tenancy_store: "ITenancyStore | None" = None,
) -> RecycleBinService:
    """Get or create RecycleBinService instance."""
    global _recycle_bin_service

    overridden = any(s is not None for s in (property_store, unit_store, tenancy_store))
    if _recycle_bin_service is not None and not overridden:
        return _recycle_bin_service

    from propdiary.infrastructure.storage.sqlite import (
        get_property_store,
        get_tenancy_store,
        get_unit_store,
    )

    service = RecycleBinService(
        property_store=property_store or await get_property_store(),
        unit_store=unit_store or await get_unit_store(),
        tenancy_store=tenancy_store or await get_tenancy_store(),
        retention_days=get_settings().retention.retention_days,
    )

    if not overridden:
        _recycle_bin_service = service

    return service


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _diary_service, _recycle_bin_service
    _diary_service = None
    _recycle_bin_service = None
