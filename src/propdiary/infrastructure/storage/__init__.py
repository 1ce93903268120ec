"""Storage infrastructure implementations."""

from propdiary.infrastructure.storage.sqlite import (
    SQLiteOverlayStore,
    SQLitePropertyStore,
    SQLiteTenancyStore,
    SQLiteUnitStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLitePropertyStore",
    "SQLiteUnitStore",
    "SQLiteTenancyStore",
    "SQLiteOverlayStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
