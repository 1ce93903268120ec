"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from propdiary.application.dto.requests import (
    CreatePropertyRequest,
    CreateTenancyRequest,
    CreateUnitRequest,
    UpdateDiaryEventRequest,
    UpdatePropertyRequest,
    UpdateTenancyRequest,
    UpdateUnitRequest,
)
from propdiary.application.dto.responses import (
    DashboardResponse,
    DeletedItemResponse,
    DiaryEventListResponse,
    DiaryEventResponse,
    ErrorResponse,
    HealthResponse,
    PortfolioStatsResponse,
    PropertyListResponse,
    PropertyResponse,
    RecycleBinListResponse,
    SweepResponse,
    TenancyListResponse,
    TenancyResponse,
    UnitListResponse,
    UnitResponse,
    UrgentDiaryResponse,
)

__all__ = [
    # Requests
    "CreatePropertyRequest",
    "UpdatePropertyRequest",
    "CreateUnitRequest",
    "UpdateUnitRequest",
    "CreateTenancyRequest",
    "UpdateTenancyRequest",
    "UpdateDiaryEventRequest",
    # Responses
    "PropertyResponse",
    "PropertyListResponse",
    "UnitResponse",
    "UnitListResponse",
    "TenancyResponse",
    "TenancyListResponse",
    "DiaryEventResponse",
    "DiaryEventListResponse",
    "UrgentDiaryResponse",
    "DeletedItemResponse",
    "RecycleBinListResponse",
    "SweepResponse",
    "PortfolioStatsResponse",
    "DashboardResponse",
    "HealthResponse",
    "ErrorResponse",
]
