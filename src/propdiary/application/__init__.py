"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection
"""

from propdiary.application.services import (
    get_diary_service,
    get_recycle_bin_service,
    reset_services,
)
from propdiary.application.use_cases import (
    BuildDashboardUseCase,
    SweepRecycleBinUseCase,
)

__all__ = [
    # Use Cases
    "BuildDashboardUseCase",
    "SweepRecycleBinUseCase",
    # Service factories
    "get_diary_service",
    "get_recycle_bin_service",
    "reset_services",
]
