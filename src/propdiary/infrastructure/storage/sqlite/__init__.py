"""SQLite storage implementations."""

from propdiary.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from propdiary.infrastructure.storage.sqlite.overlay_store import SQLiteOverlayStore
from propdiary.infrastructure.storage.sqlite.property_store import SQLitePropertyStore
from propdiary.infrastructure.storage.sqlite.tenancy_store import SQLiteTenancyStore
from propdiary.infrastructure.storage.sqlite.unit_store import SQLiteUnitStore

# Singleton instances
_property_store: SQLitePropertyStore | None = None
_unit_store: SQLiteUnitStore | None = None
_tenancy_store: SQLiteTenancyStore | None = None
_overlay_store: SQLiteOverlayStore | None = None


async def get_property_store() -> SQLitePropertyStore:
    """Get singleton property store instance."""
    global _property_store
    if _property_store is None:
        _property_store = SQLitePropertyStore()
    return _property_store


async def get_unit_store() -> SQLiteUnitStore:
    """Get singleton unit store instance."""
    global _unit_store
    if _unit_store is None:
        _unit_store = SQLiteUnitStore()
    return _unit_store


async def get_tenancy_store() -> SQLiteTenancyStore:
    """Get singleton tenancy store instance."""
    global _tenancy_store
    if _tenancy_store is None:
        _tenancy_store = SQLiteTenancyStore()
    return _tenancy_store


async def get_overlay_store() -> SQLiteOverlayStore:
    """Get singleton overlay store instance."""
    global _overlay_store
    if _overlay_store is None:
        _overlay_store = SQLiteOverlayStore()
    return _overlay_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLitePropertyStore",
    "SQLiteUnitStore",
    "SQLiteTenancyStore",
    "SQLiteOverlayStore",
    # Factory functions
    "get_property_store",
    "get_unit_store",
    "get_tenancy_store",
    "get_overlay_store",
]
