"""Tests for SQLitePropertyStore and SQLiteUnitStore."""

from datetime import UTC, datetime

import pytest

from propdiary.core.entities import Property, PropertyStatus, Tenure, Unit, UnitStatus
from propdiary.infrastructure.storage.sqlite import (
    SQLitePropertyStore,
    SQLiteTenancyStore,
    SQLiteUnitStore,
    get_connection,
)

DELETED_AT = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


async def _count(table: str) -> int:
    async with get_connection() as conn:
        cursor = await conn.execute(f"SELECT COUNT(*) FROM {table}")
        return (await cursor.fetchone())[0]


class TestSQLitePropertyStore:
    """Tests for SQLitePropertyStore."""

    @pytest.fixture(autouse=True)
    def _setup(self, db_pool):
        self.store = SQLitePropertyStore()
        self.units = SQLiteUnitStore()
        self.tenancies = SQLiteTenancyStore()

    async def test_create_and_get(self, sample_property):
        prop = sample_property.model_copy(
            update={"tenure": Tenure.FREEHOLD, "purchase_price": 900_000.0}
        )
        await self.store.create(prop)

        loaded = await self.store.get(prop.id)

        assert loaded is not None
        assert loaded.name == "Riverside House"
        assert loaded.tenure == Tenure.FREEHOLD
        assert loaded.status == PropertyStatus.ACTIVE
        assert loaded.purchase_price == 900_000.0
        assert loaded.created_at == prop.created_at

    async def test_get_missing(self):
        assert await self.store.get("missing") is None

    async def test_update(self, sample_property):
        await self.store.create(sample_property)
        changed = sample_property.model_copy(update={"name": "Riverside Court"})

        await self.store.update(changed)

        assert (await self.store.get(sample_property.id)).name == "Riverside Court"

    async def test_list_hides_archived_and_deleted(self):
        await self.store.create(Property(id="a", name="Alpha"))
        await self.store.create(Property(id="b", name="Bravo"))
        await self.store.create(Property(id="c", name="Charlie"))
        await self.store.archive("b")
        await self.store.soft_delete("c", DELETED_AT)

        assert [p.id for p in await self.store.list()] == ["a"]
        assert [p.id for p in await self.store.list(include_archived=True)] == ["a", "b"]
        everything = await self.store.list(include_archived=True, include_deleted=True)
        assert [p.id for p in everything] == ["a", "b", "c"]

    async def test_soft_delete_sets_tombstone(self, sample_property):
        await self.store.create(sample_property)

        assert await self.store.soft_delete(sample_property.id, DELETED_AT)

        binned = await self.store.list_deleted()
        assert [p.id for p in binned] == [sample_property.id]
        assert binned[0].is_deleted is True
        assert binned[0].deleted_at == DELETED_AT

    async def test_restore_clears_tombstone(self, sample_property):
        await self.store.create(sample_property)
        await self.store.soft_delete(sample_property.id, DELETED_AT)

        assert await self.store.restore(sample_property.id)

        restored = await self.store.get(sample_property.id)
        assert restored.is_deleted is False
        assert restored.deleted_at is None
        assert await self.store.list_deleted() == []

    async def test_restore_unarchives(self, sample_property):
        await self.store.create(sample_property)
        await self.store.archive(sample_property.id)

        await self.store.restore(sample_property.id)

        assert (await self.store.get(sample_property.id)).is_archived is False

    async def test_restore_from_bin_keeps_archive_flag(self, sample_property):
        await self.store.create(sample_property)
        await self.store.archive(sample_property.id)
        await self.store.soft_delete(sample_property.id, DELETED_AT)

        await self.store.restore(sample_property.id)

        restored = await self.store.get(sample_property.id)
        assert restored.is_deleted is False
        assert restored.is_archived is True

    async def test_mutations_on_missing_return_false(self):
        assert await self.store.archive("missing") is False
        assert await self.store.restore("missing") is False
        assert await self.store.soft_delete("missing", DELETED_AT) is False
        assert await self.store.delete("missing") is False

    async def test_delete_cascades_to_units_and_tenancies(
        self, sample_property, sample_unit, sample_tenancy
    ):
        await self.store.create(sample_property)
        await self.units.create(sample_unit)
        await self.units.create(Unit(id="unit-2", property_id=sample_property.id, unit_number="G02"))
        await self.tenancies.create(sample_tenancy)
        await self.store.create(Property(id="other", name="Other"))
        await self.units.create(Unit(id="other-unit", property_id="other", unit_number="1"))

        assert await self.store.delete(sample_property.id)

        assert await self.store.get(sample_property.id) is None
        assert [u.id for u in await self.units.list(include_archived=True, include_deleted=True)] == [
            "other-unit"
        ]
        assert await _count("tenancies") == 0


class TestSQLiteUnitStore:
    """Tests for SQLiteUnitStore."""

    @pytest.fixture(autouse=True)
    async def _setup(self, db_pool, sample_property):
        self.properties = SQLitePropertyStore()
        self.store = SQLiteUnitStore()
        self.tenancies = SQLiteTenancyStore()
        await self.properties.create(sample_property)

    async def test_create_and_get(self, sample_unit):
        unit = sample_unit.model_copy(update={"floor_number": 2, "size_sqft": 1200.0})
        await self.store.create(unit)

        loaded = await self.store.get(unit.id)

        assert loaded.unit_number == "G01"
        assert loaded.floor_number == 2
        assert loaded.size_sqft == 1200.0
        assert loaded.status == UnitStatus.VACANT

    async def test_list_by_property_excludes_bin(self, sample_unit):
        await self.store.create(sample_unit)
        await self.store.create(Unit(id="unit-2", property_id="prop-1", unit_number="G02"))
        await self.store.create(Unit(id="unit-3", property_id="prop-1", unit_number="G03"))
        await self.store.archive("unit-2")
        await self.store.soft_delete("unit-3", DELETED_AT)

        units = await self.store.list_by_property("prop-1")

        assert [u.id for u in units] == ["unit-1", "unit-2"]

    async def test_delete_cascades_to_tenancies(self, sample_unit, sample_tenancy):
        await self.store.create(sample_unit)
        await self.tenancies.create(sample_tenancy)

        assert await self.store.delete(sample_unit.id)

        assert await self.store.get(sample_unit.id) is None
        assert await self.tenancies.get(sample_tenancy.id) is None

    async def test_soft_delete_and_restore(self, sample_unit):
        await self.store.create(sample_unit)
        await self.store.soft_delete(sample_unit.id, DELETED_AT)

        assert [u.id for u in await self.store.list_deleted()] == [sample_unit.id]
        assert await self.store.list() == []

        await self.store.restore(sample_unit.id)

        assert [u.id for u in await self.store.list()] == [sample_unit.id]
