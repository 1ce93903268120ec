"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from propdiary.application.services import reset_services
from propdiary.config import reset_settings
from propdiary.core.entities import (
    Property,
    ReminderRule,
    ReminderSettings,
    Tenancy,
    Unit,
)
from propdiary.infrastructure.storage.sqlite import connection
from propdiary.infrastructure.storage.sqlite.connection import ConnectionPool
from propdiary.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point storage at a temp dir and drop cached settings and services."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("RETENTION_PERIODIC_SWEEP_ENABLED", "false")
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def today() -> date:
    """Fixed evaluation date used across diary tests."""
    return date(2025, 3, 15)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time used across recycle bin tests."""
    return datetime(2025, 3, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def sample_property() -> Property:
    """Create a sample property."""
    return Property(
        id="prop-1",
        name="Riverside House",
        address="1 River Lane, Leeds",
        property_type="office",
        current_value=1_250_000.0,
    )


@pytest.fixture
def sample_unit(sample_property: Property) -> Unit:
    """Create a sample unit in the sample property."""
    return Unit(
        id="unit-1",
        property_id=sample_property.id,
        unit_number="G01",
        unit_type="office",
        rent_amount=2500.0,
    )


@pytest.fixture
def sample_tenancy(sample_unit: Unit) -> Tenancy:
    """Create a tenancy whose lease expiry reminder is due on 2025-03-15."""
    return Tenancy(
        id="ten-1",
        unit_id=sample_unit.id,
        tenant_name="Acme Ltd",
        lease_start_date=date(2020, 6, 2),
        lease_end_date=date(2025, 6, 1),
        monthly_rent=2500.0,
        reminder_settings=ReminderSettings(
            lease_expiry=ReminderRule(enabled=True, months_before=3),
        ),
    )


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def db_pool(
    temp_db_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> AsyncGenerator[ConnectionPool, None]:
    """Migrate a temporary database and install it as the global pool."""
    await initialize_database(temp_db_path, create_backup_before=False)

    pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=5000)
    await pool.initialize()
    monkeypatch.setattr(connection, "_pool", pool)

    yield pool

    await pool.close()
