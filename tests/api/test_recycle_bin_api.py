"""API tests for recycle bin endpoints."""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from propdiary.api.dependencies import get_recycle_bin, get_sweep_use_case
from propdiary.api.main import app
from propdiary.core.entities import Property, Tenancy, Unit
from propdiary.core.entities.base import utc_now
from propdiary.core.services import RecycleBinService, SweepResult


def _make_store(records: list) -> AsyncMock:
    """Mock record store backed by a list."""
    by_id = {r.id: r for r in records}
    store = AsyncMock()
    store.list = AsyncMock(return_value=records)
    store.list_deleted = AsyncMock(return_value=[r for r in records if r.is_deleted])
    store.get = AsyncMock(side_effect=lambda record_id: by_id.get(record_id))
    store.restore = AsyncMock(return_value=True)
    store.delete = AsyncMock(return_value=True)
    return store


class TestRecycleBinAPI:
    """Tests for /api/recycle-bin."""

    @pytest.fixture(autouse=True)
    def _setup(self):
        now = utc_now()

        self.prop = Property(id="prop-1", name="Riverside House", address="1 River Lane")
        self.unit = Unit(id="unit-1", property_id="prop-1", unit_number="G01")
        self.unit.mark_deleted(now - timedelta(days=27, hours=1))
        self.tenancy = Tenancy(
            id="ten-1",
            unit_id="unit-1",
            tenant_name="Acme Ltd",
            lease_start_date=date(2024, 1, 1),
            lease_end_date=date(2029, 1, 1),
        )
        self.tenancy.mark_deleted(now - timedelta(days=2))

        self.property_store = _make_store([self.prop])
        self.unit_store = _make_store([self.unit])
        self.tenancy_store = _make_store([self.tenancy])
        self.service = RecycleBinService(
            self.property_store, self.unit_store, self.tenancy_store, retention_days=30
        )

        self.sweep = AsyncMock()
        self.sweep.execute = AsyncMock(return_value=SweepResult())

        app.dependency_overrides[get_recycle_bin] = lambda: self.service
        app.dependency_overrides[get_sweep_use_case] = lambda: self.sweep

    async def test_list_sweeps_then_lists(self, async_client: AsyncClient):
        response = await async_client.get("/api/recycle-bin")

        assert response.status_code == 200
        data = response.json()
        self.sweep.execute.assert_awaited_once()
        assert data["swept"] == 0
        assert data["retention_days"] == 30
        assert data["total"] == 2

        unit_item, tenancy_item = data["items"]
        assert unit_item["id"] == "unit-1"
        assert unit_item["name"] == "Unit G01"
        assert unit_item["description"] == "office • Riverside House"
        assert unit_item["days_remaining"] == 3
        assert unit_item["urgency"] == "critical"
        assert tenancy_item["description"] == "Unit G01 • Riverside House"
        assert tenancy_item["days_remaining"] == 28
        assert tenancy_item["urgency"] == "low"

    async def test_list_reports_swept_count(self, async_client: AsyncClient):
        self.sweep.execute.return_value = SweepResult(
            purged={"property": ["old-1"], "unit": ["old-2"], "tenancy": []}
        )

        response = await async_client.get("/api/recycle-bin")

        assert response.json()["swept"] == 2

    async def test_list_filters(self, async_client: AsyncClient):
        by_type = await async_client.get("/api/recycle-bin", params={"item_type": "tenancy"})
        by_text = await async_client.get("/api/recycle-bin", params={"search": "acme"})

        assert [i["id"] for i in by_type.json()["items"]] == ["ten-1"]
        assert [i["id"] for i in by_text.json()["items"]] == ["ten-1"]

    async def test_list_invalid_item_type(self, async_client: AsyncClient):
        response = await async_client.get("/api/recycle-bin", params={"item_type": "invoice"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_manual_sweep(self, async_client: AsyncClient):
        self.sweep.execute.return_value = SweepResult(
            purged={"property": [], "unit": [], "tenancy": ["ten-9"]}
        )

        response = await async_client.post("/api/recycle-bin/sweep")

        assert response.status_code == 200
        assert response.json() == {
            "total": 1,
            "purged": {"property": [], "unit": [], "tenancy": ["ten-9"]},
        }

    async def test_restore(self, async_client: AsyncClient):
        response = await async_client.post("/api/recycle-bin/unit/unit-1/restore")

        assert response.status_code == 204
        self.unit_store.restore.assert_awaited_once_with("unit-1")

    async def test_restore_record_not_in_bin(self, async_client: AsyncClient):
        response = await async_client.post("/api/recycle-bin/property/prop-1/restore")

        assert response.status_code == 404
        assert response.json()["error_code"] == "RECYCLE_BIN_ITEM_NOT_FOUND"
        self.property_store.restore.assert_not_awaited()

    async def test_purge(self, async_client: AsyncClient):
        response = await async_client.delete("/api/recycle-bin/tenancy/ten-1")

        assert response.status_code == 204
        self.tenancy_store.delete.assert_awaited_once_with("ten-1")

    async def test_purge_unknown(self, async_client: AsyncClient):
        response = await async_client.delete("/api/recycle-bin/tenancy/missing")

        assert response.status_code == 404

    async def test_purge_invalid_item_type(self, async_client: AsyncClient):
        response = await async_client.delete("/api/recycle-bin/lease/ten-1")

        assert response.status_code == 400
