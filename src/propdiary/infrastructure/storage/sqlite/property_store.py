"""
SQLite implementation of property storage.

Permanent deletion cascades to the property's units and their tenancies
in one transaction.
"""

from __future__ import annotations

from datetime import datetime

import aiosqlite

from propdiary.config import get_logger
from propdiary.core.entities.base import utc_now
from propdiary.core.entities.property import Property, PropertyStatus, Tenure
from propdiary.core.interfaces.storage import IPropertyStore
from propdiary.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from propdiary.infrastructure.storage.sqlite.rows import (
    parse_datetime,
    to_iso,
    visibility_clause,
)

logger = get_logger(__name__)


class SQLitePropertyStore(IPropertyStore):
    """SQLite implementation of property storage."""

    async def create(self, prop: Property) -> Property:
        """Create a new property."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO properties (
                    id, name, address, property_type, status, tenure,
                    description, purchase_price, current_value, property_manager,
                    is_archived, is_deleted, deleted_at, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    prop.id,
                    prop.name,
                    prop.address,
                    prop.property_type,
                    prop.status.value,
                    prop.tenure.value if prop.tenure else None,
                    prop.description,
                    prop.purchase_price,
                    prop.current_value,
                    prop.property_manager,
                    1 if prop.is_archived else 0,
                    1 if prop.is_deleted else 0,
                    to_iso(prop.deleted_at),
                    to_iso(prop.created_at),
                    to_iso(prop.updated_at),
                ),
            )
        logger.info("property_created", property_id=prop.id, name=prop.name)
        return prop

    async def get(self, property_id: str) -> Property | None:
        """Get property by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM properties WHERE id = ?", (property_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def update(self, prop: Property) -> Property:
        """Update an existing property."""
        prop.updated_at = utc_now()
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE properties SET
                    name = ?, address = ?, property_type = ?, status = ?,
                    tenure = ?, description = ?, purchase_price = ?,
                    current_value = ?, property_manager = ?, is_archived = ?,
                    is_deleted = ?, deleted_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    prop.name,
                    prop.address,
                    prop.property_type,
                    prop.status.value,
                    prop.tenure.value if prop.tenure else None,
                    prop.description,
                    prop.purchase_price,
                    prop.current_value,
                    prop.property_manager,
                    1 if prop.is_archived else 0,
                    1 if prop.is_deleted else 0,
                    to_iso(prop.deleted_at),
                    to_iso(prop.updated_at),
                    prop.id,
                ),
            )
        logger.info("property_updated", property_id=prop.id)
        return prop

    async def list(
        self, include_archived: bool = False, include_deleted: bool = False
    ) -> list[Property]:
        """List properties ordered by name."""
        where = visibility_clause(include_archived, include_deleted)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM properties WHERE {where} ORDER BY name COLLATE NOCASE, id"
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def list_deleted(self) -> list[Property]:
        """List properties in the recycle bin, oldest deletion first."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM properties WHERE is_deleted = 1 ORDER BY deleted_at ASC"
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def archive(self, property_id: str) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "UPDATE properties SET is_archived = 1, updated_at = ? WHERE id = ?",
                (to_iso(utc_now()), property_id),
            )
            archived = cursor.rowcount > 0
        if archived:
            logger.info("property_archived", property_id=property_id)
        return archived

    async def restore(self, property_id: str) -> bool:
        """Clear the tombstone if deleted, otherwise clear the archive flag."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE properties SET
                    is_archived = CASE WHEN is_deleted = 1 THEN is_archived ELSE 0 END,
                    is_deleted = 0, deleted_at = NULL, updated_at = ?
                WHERE id = ?
                """,
                (to_iso(utc_now()), property_id),
            )
            restored = cursor.rowcount > 0
        if restored:
            logger.info("property_restored", property_id=property_id)
        return restored

    async def soft_delete(self, property_id: str, deleted_at: datetime) -> bool:
        """Move a property to the recycle bin."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE properties SET is_deleted = 1, deleted_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (to_iso(deleted_at), to_iso(utc_now()), property_id),
            )
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("property_soft_deleted", property_id=property_id)
        return deleted

    async def delete(self, property_id: str) -> bool:
        """Permanently delete a property, its units and their tenancies."""
        async with get_transaction() as conn:
            tenancies = await conn.execute(
                """
                DELETE FROM tenancies
                WHERE unit_id IN (SELECT id FROM units WHERE property_id = ?)
                """,
                (property_id,),
            )
            units = await conn.execute(
                "DELETE FROM units WHERE property_id = ?", (property_id,)
            )
            cursor = await conn.execute("DELETE FROM properties WHERE id = ?", (property_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info(
                "property_deleted",
                property_id=property_id,
                units_removed=units.rowcount,
                tenancies_removed=tenancies.rowcount,
            )
        return deleted

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Property:
        """Convert a database row to a Property entity."""
        return Property(
            id=row["id"],
            name=row["name"],
            address=row["address"] or "",
            property_type=row["property_type"],
            status=PropertyStatus(row["status"]),
            tenure=Tenure(row["tenure"]) if row["tenure"] else None,
            description=row["description"],
            purchase_price=row["purchase_price"],
            current_value=row["current_value"],
            property_manager=row["property_manager"],
            is_archived=bool(row["is_archived"]),
            is_deleted=bool(row["is_deleted"]),
            deleted_at=parse_datetime(row["deleted_at"]),
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
