"""API tests for the dashboard endpoint."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from propdiary.api.dependencies import get_dashboard_use_case
from propdiary.api.main import app
from propdiary.application.use_cases import DashboardResult, PortfolioStats
from propdiary.core.entities import DiaryEvent, DiaryEventType
from propdiary.core.entities.base import utc_now, utc_today
from propdiary.core.services import DashboardDigest
from propdiary.infrastructure.storage.sqlite.connection import ConnectionPool


def _make_event(days_ahead: int) -> DiaryEvent:
    now = utc_now()
    return DiaryEvent(
        id="lease_expiry_ten-1",
        event_type=DiaryEventType.LEASE_EXPIRY,
        event_date=utc_today() + timedelta(days=days_ahead),
        title="Lease Expiry - Acme Ltd",
        description="Lease expires soon",
        tenancy_id="ten-1",
        property_name="Riverside House",
        unit_number="G01",
        tenant_name="Acme Ltd",
        monthly_rent=2500.0,
        created_at=now,
        updated_at=now,
    )


class TestDashboardAPI:
    """Tests for /api/dashboard with a stubbed use case."""

    @pytest.fixture(autouse=True)
    def _setup(self):
        self.use_case = AsyncMock()
        app.dependency_overrides[get_dashboard_use_case] = lambda: self.use_case

    async def test_stats_and_urgent(self, async_client: AsyncClient):
        self.use_case.execute.return_value = DashboardResult(
            stats=PortfolioStats(
                total_properties=2,
                total_units=3,
                occupied_units=2,
                vacant_units=1,
                active_tenancies=2,
                monthly_revenue=5000.0,
                portfolio_value=2_000_000.0,
            ),
            urgent=DashboardDigest(events=[_make_event(3)], remaining=4, total_active=9),
        )

        response = await async_client.get("/api/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["occupancy_rate"] == 66.7
        assert data["stats"]["monthly_revenue"] == 5000.0
        assert data["urgent"]["remaining"] == 4
        assert data["urgent"]["total_active"] == 9
        event = data["urgent"]["events"][0]
        assert event["days_until"] == 3
        assert event["is_urgent"] is True

    async def test_empty_portfolio(self, async_client: AsyncClient):
        self.use_case.execute.return_value = DashboardResult()

        response = await async_client.get("/api/dashboard")

        data = response.json()
        assert data["stats"]["occupancy_rate"] == 0.0
        assert data["urgent"] == {"events": [], "remaining": 0, "total_active": 0}


class TestDashboardOverDatabase:
    """Dashboard built from real stores."""

    async def test_counts_active_records(self, db_pool: ConnectionPool, async_client: AsyncClient):
        prop = (
            await async_client.post(
                "/api/properties", json={"name": "Riverside House", "current_value": 750000}
            )
        ).json()
        unit = (
            await async_client.post(
                "/api/units", json={"property_id": prop["id"], "unit_number": "G01"}
            )
        ).json()
        await async_client.post(
            "/api/units", json={"property_id": prop["id"], "unit_number": "G02"}
        )
        today = utc_today()
        await async_client.post(
            "/api/tenancies",
            json={
                "unit_id": unit["id"],
                "tenant_name": "Acme Ltd",
                "lease_start_date": (today - timedelta(days=400)).isoformat(),
                "lease_end_date": (today + timedelta(days=10)).isoformat(),
                "monthly_rent": 1800,
                "reminder_settings": {"lease_expiry": {"enabled": True, "months_before": 1}},
            },
        )

        data = (await async_client.get("/api/dashboard")).json()

        assert data["stats"]["total_units"] == 2
        assert data["stats"]["occupied_units"] == 1
        assert data["stats"]["occupancy_rate"] == 50.0
        assert data["stats"]["monthly_revenue"] == 1800.0
        assert data["stats"]["portfolio_value"] == 750000.0
        assert [e["tenant_name"] for e in data["urgent"]["events"]] == ["Acme Ltd"]
