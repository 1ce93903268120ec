"""API route modules."""

from propdiary.api.routes.dashboard import router as dashboard_router
from propdiary.api.routes.diary import router as diary_router
from propdiary.api.routes.health import router as health_router
from propdiary.api.routes.properties import router as properties_router
from propdiary.api.routes.recycle_bin import router as recycle_bin_router
from propdiary.api.routes.tenancies import router as tenancies_router
from propdiary.api.routes.units import router as units_router

__all__ = [
    "health_router",
    "properties_router",
    "units_router",
    "tenancies_router",
    "diary_router",
    "recycle_bin_router",
    "dashboard_router",
]
