"""Application use cases."""

from propdiary.application.use_cases.build_dashboard import (
    BuildDashboardUseCase,
    DashboardResult,
    PortfolioStats,
)
from propdiary.application.use_cases.sweep_recycle_bin import (
    SweepRecycleBinUseCase,
    run_periodic_sweep,
)

__all__ = [
    "BuildDashboardUseCase",
    "DashboardResult",
    "PortfolioStats",
    "SweepRecycleBinUseCase",
    "run_periodic_sweep",
]
