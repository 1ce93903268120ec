"""SQLite implementation of unit storage."""

from __future__ import annotations

from datetime import datetime

import aiosqlite

from propdiary.config import get_logger
from propdiary.core.entities.base import utc_now
from propdiary.core.entities.property import Unit, UnitStatus
from propdiary.core.interfaces.storage import IUnitStore
from propdiary.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from propdiary.infrastructure.storage.sqlite.rows import (
    parse_datetime,
    to_iso,
    visibility_clause,
)

logger = get_logger(__name__)


class SQLiteUnitStore(IUnitStore):
    """SQLite implementation of unit storage."""

    async def create(self, unit: Unit) -> Unit:
        """Create a new unit."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO units (
                    id, property_id, unit_number, unit_type, floor_number,
                    size_sqft, rent_amount, status,
                    is_archived, is_deleted, deleted_at, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    unit.id,
                    unit.property_id,
                    unit.unit_number,
                    unit.unit_type,
                    unit.floor_number,
                    unit.size_sqft,
                    unit.rent_amount,
                    unit.status.value,
                    1 if unit.is_archived else 0,
                    1 if unit.is_deleted else 0,
                    to_iso(unit.deleted_at),
                    to_iso(unit.created_at),
                    to_iso(unit.updated_at),
                ),
            )
        logger.info("unit_created", unit_id=unit.id, property_id=unit.property_id)
        return unit

    async def get(self, unit_id: str) -> Unit | None:
        """Get unit by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM units WHERE id = ?", (unit_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def update(self, unit: Unit) -> Unit:
        """Update an existing unit."""
        unit.updated_at = utc_now()
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE units SET
                    property_id = ?, unit_number = ?, unit_type = ?,
                    floor_number = ?, size_sqft = ?, rent_amount = ?, status = ?,
                    is_archived = ?, is_deleted = ?, deleted_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    unit.property_id,
                    unit.unit_number,
                    unit.unit_type,
                    unit.floor_number,
                    unit.size_sqft,
                    unit.rent_amount,
                    unit.status.value,
                    1 if unit.is_archived else 0,
                    1 if unit.is_deleted else 0,
                    to_iso(unit.deleted_at),
                    to_iso(unit.updated_at),
                    unit.id,
                ),
            )
        logger.info("unit_updated", unit_id=unit.id)
        return unit

    async def list(
        self, include_archived: bool = False, include_deleted: bool = False
    ) -> list[Unit]:
        where = visibility_clause(include_archived, include_deleted)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM units WHERE {where} ORDER BY property_id, unit_number, id"
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def list_by_property(self, property_id: str) -> list[Unit]:
        """List a property's units, archived included, recycle bin excluded."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM units
                WHERE property_id = ? AND is_deleted = 0
                ORDER BY unit_number, id
                """,
                (property_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def list_deleted(self) -> list[Unit]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM units WHERE is_deleted = 1 ORDER BY deleted_at ASC"
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def archive(self, unit_id: str) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE units SET is_archived = 1, updated_at = ? WHERE id = ?",
                (to_iso(utc_now()), unit_id),
            )
            archived = cursor.rowcount > 0
        if archived:
            logger.info("unit_archived", unit_id=unit_id)
        return archived

    async def restore(self, unit_id: str) -> bool:
        """Clear the tombstone if deleted, otherwise clear the archive flag."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE units SET
                    is_archived = CASE WHEN is_deleted = 1 THEN is_archived ELSE 0 END,
                    is_deleted = 0, deleted_at = NULL, updated_at = ?
                WHERE id = ?
                """,
                (to_iso(utc_now()), unit_id),
            )
            restored = cursor.rowcount > 0
        if restored:
            logger.info("unit_restored", unit_id=unit_id)
        return restored

    async def soft_delete(self, unit_id: str, deleted_at: datetime) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE units SET is_deleted = 1, deleted_at = ?, updated_at = ? WHERE id = ?",
                (to_iso(deleted_at), to_iso(utc_now()), unit_id),
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("unit_soft_deleted", unit_id=unit_id)
        return deleted

    async def delete(self, unit_id: str) -> bool:
        """Permanently delete a unit and its tenancies."""
        async with get_transaction() as conn:
            tenancies = await conn.execute("DELETE FROM tenancies WHERE unit_id = ?", (unit_id,))
            cursor = await conn.execute("DELETE FROM units WHERE id = ?", (unit_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("unit_deleted", unit_id=unit_id, tenancies_removed=tenancies.rowcount)
        return deleted

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Unit:
        """Convert a database row to a Unit entity."""
        return Unit(
            id=row["id"],
            property_id=row["property_id"],
            unit_number=row["unit_number"],
            unit_type=row["unit_type"],
            floor_number=row["floor_number"],
            size_sqft=row["size_sqft"],
            rent_amount=row["rent_amount"],
            status=UnitStatus(row["status"]),
            is_archived=bool(row["is_archived"]),
            is_deleted=bool(row["is_deleted"]),
            deleted_at=parse_datetime(row["deleted_at"]),
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
