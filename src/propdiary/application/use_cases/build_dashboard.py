"""
Build Dashboard Use Case.

Portfolio totals over active records plus the most urgent diary events.
"""

from dataclasses import dataclass, field
from datetime import date

from propdiary.config import get_logger
from propdiary.core.entities.property import UnitStatus
from propdiary.core.entities.tenancy import TenancyStatus
from propdiary.core.interfaces.storage import IPropertyStore, ITenancyStore, IUnitStore
from propdiary.core.services import DashboardDigest, DiaryService

logger = get_logger(__name__)


@dataclass
class PortfolioStats:
    """Totals shown at the top of the dashboard."""

    total_properties: int = 0
    total_units: int = 0
    occupied_units: int = 0
    vacant_units: int = 0
    active_tenancies: int = 0
    monthly_revenue: float = 0.0
    portfolio_value: float = 0.0

    @property
    def occupancy_rate(self) -> float:
        if self.total_units == 0:
            return 0.0
        return round(self.occupied_units / self.total_units * 100, 1)


@dataclass
class DashboardResult:
    """Result of building the dashboard."""

    stats: PortfolioStats = field(default_factory=PortfolioStats)
    urgent: DashboardDigest = field(default_factory=DashboardDigest)


class BuildDashboardUseCase:
    """Use case for the dashboard summary."""

    def __init__(
        self,
        property_store: IPropertyStore | None = None,
        unit_store: IUnitStore | None = None,
        tenancy_store: ITenancyStore | None = None,
        diary_service: DiaryService | None = None,
    ):
        self._property_store = property_store
        self._unit_store = unit_store
        self._tenancy_store = tenancy_store
        self._diary_service = diary_service

    async def _get_property_store(self) -> IPropertyStore:
        if self._property_store is None:
            from propdiary.infrastructure.storage.sqlite import get_property_store
            self._property_store = await get_property_store()
        return self._property_store

    async def _get_unit_store(self) -> IUnitStore:
        if self._unit_store is None:
            from propdiary.infrastructure.storage.sqlite import get_unit_store
            self._unit_store = await get_unit_store()
        return self._unit_store

    async def _get_tenancy_store(self) -> ITenancyStore:
        if self._tenancy_store is None:
            from propdiary.infrastructure.storage.sqlite import get_tenancy_store
            self._tenancy_store = await get_tenancy_store()
        return self._tenancy_store

    async def _get_diary_service(self) -> DiaryService:
        if self._diary_service is None:
            from propdiary.application.services import get_diary_service
            self._diary_service = await get_diary_service()
        return self._diary_service

    async def execute(self, today: date | None = None) -> DashboardResult:
        """
        Build the dashboard.

        Args:
            today: Evaluation date for the diary (defaults to the current UTC date).

        Returns:
            DashboardResult with portfolio stats and urgent events.
        """
        properties = await (await self._get_property_store()).list()
        units = await (await self._get_unit_store()).list()
        tenancies = await (await self._get_tenancy_store()).list()

        active_tenancies = [t for t in tenancies if t.status is TenancyStatus.ACTIVE]
        occupied = sum(1 for u in units if u.status is UnitStatus.OCCUPIED)

        stats = PortfolioStats(
            total_properties=len(properties),
            total_units=len(units),
            occupied_units=occupied,
            vacant_units=len(units) - occupied,
            active_tenancies=len(active_tenancies),
            monthly_revenue=sum(t.monthly_rent for t in active_tenancies),
            portfolio_value=sum(p.current_value or 0.0 for p in properties),
        )

        urgent = await (await self._get_diary_service()).dashboard(today)

        logger.debug(
            "dashboard_built",
            properties=stats.total_properties,
            units=stats.total_units,
            urgent_events=len(urgent.events),
        )
        return DashboardResult(stats=stats, urgent=urgent)
