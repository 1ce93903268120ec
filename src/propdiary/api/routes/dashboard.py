"""
Dashboard endpoint.
"""

from fastapi import APIRouter, Depends

from propdiary.api.dependencies import get_dashboard_use_case
from propdiary.api.routes.diary import digest_to_response
from propdiary.application.dto.responses import DashboardResponse, PortfolioStatsResponse
from propdiary.application.use_cases import BuildDashboardUseCase
from propdiary.core.entities.base import utc_today

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    use_case: BuildDashboardUseCase = Depends(get_dashboard_use_case),
) -> DashboardResponse:
    """Portfolio totals and the most urgent diary events."""
    today = utc_today()
    result = await use_case.execute(today)
    stats = result.stats

    return DashboardResponse(
        stats=PortfolioStatsResponse(
            total_properties=stats.total_properties,
            total_units=stats.total_units,
            occupied_units=stats.occupied_units,
            vacant_units=stats.vacant_units,
            active_tenancies=stats.active_tenancies,
            occupancy_rate=stats.occupancy_rate,
            monthly_revenue=stats.monthly_revenue,
            portfolio_value=stats.portfolio_value,
        ),
        urgent=digest_to_response(result.urgent, today),
    )
