"""
SQLite implementation of tenancy storage.

Tenancy lifecycle changes keep the owning unit's occupancy in step:
creating or restoring a tenancy occupies the unit; archiving, binning
or deleting it frees the unit. Both writes share one transaction.
"""

from __future__ import annotations

import json
from datetime import datetime

import aiosqlite

from propdiary.config import get_logger
from propdiary.core.entities.base import utc_now
from propdiary.core.entities.property import UnitStatus
from propdiary.core.entities.tenancy import (
    BreakType,
    ReminderSettings,
    RentReviewType,
    Tenancy,
    TenancyStatus,
)
from propdiary.core.interfaces.storage import ITenancyStore
from propdiary.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from propdiary.infrastructure.storage.sqlite.rows import (
    parse_date,
    parse_datetime,
    to_iso,
    visibility_clause,
)

logger = get_logger(__name__)


async def _set_unit_status(
    conn: aiosqlite.Connection, tenancy_id: str, status: UnitStatus, stamp: str
) -> None:
    await conn.execute(
        """
        UPDATE units SET status = ?, updated_at = ?
        WHERE id = (SELECT unit_id FROM tenancies WHERE id = ?)
        """,
        (status.value, stamp, tenancy_id),
    )


class SQLiteTenancyStore(ITenancyStore):
    """SQLite implementation of tenancy storage."""

    async def create(self, tenancy: Tenancy) -> Tenancy:
        """Create a tenancy and mark its unit occupied."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO tenancies (
                    id, unit_id, tenant_name, tenant_email, tenant_phone,
                    lease_start_date, lease_end_date, monthly_rent, security_deposit,
                    status, notes, break_date, break_type, rent_review_date,
                    rent_review_type, reminder_settings,
                    is_archived, is_deleted, deleted_at, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    tenancy.id,
                    tenancy.unit_id,
                    tenancy.tenant_name,
                    tenancy.tenant_email,
                    tenancy.tenant_phone,
                    to_iso(tenancy.lease_start_date),
                    to_iso(tenancy.lease_end_date),
                    tenancy.monthly_rent,
                    tenancy.security_deposit,
                    tenancy.status.value,
                    tenancy.notes,
                    to_iso(tenancy.break_date),
                    tenancy.break_type.value if tenancy.break_type else None,
                    to_iso(tenancy.rent_review_date),
                    tenancy.rent_review_type.value if tenancy.rent_review_type else None,
                    tenancy.reminder_settings.model_dump_json(),
                    1 if tenancy.is_archived else 0,
                    1 if tenancy.is_deleted else 0,
                    to_iso(tenancy.deleted_at),
                    to_iso(tenancy.created_at),
                    to_iso(tenancy.updated_at),
                ),
            )
            if tenancy.is_active:
                await _set_unit_status(conn, tenancy.id, UnitStatus.OCCUPIED, to_iso(utc_now()))
        logger.info("tenancy_created", tenancy_id=tenancy.id, unit_id=tenancy.unit_id)
        return tenancy

    async def get(self, tenancy_id: str) -> Tenancy | None:
        """Get tenancy by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM tenancies WHERE id = ?", (tenancy_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def update(self, tenancy: Tenancy) -> Tenancy:
        """Update an existing tenancy, reminder settings included."""
        tenancy.updated_at = utc_now()
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE tenancies SET
                    unit_id = ?, tenant_name = ?, tenant_email = ?, tenant_phone = ?,
                    lease_start_date = ?, lease_end_date = ?, monthly_rent = ?,
                    security_deposit = ?, status = ?, notes = ?, break_date = ?,
                    break_type = ?, rent_review_date = ?, rent_review_type = ?,
                    reminder_settings = ?, is_archived = ?, is_deleted = ?,
                    deleted_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    tenancy.unit_id,
                    tenancy.tenant_name,
                    tenancy.tenant_email,
                    tenancy.tenant_phone,
                    to_iso(tenancy.lease_start_date),
                    to_iso(tenancy.lease_end_date),
                    tenancy.monthly_rent,
                    tenancy.security_deposit,
                    tenancy.status.value,
                    tenancy.notes,
                    to_iso(tenancy.break_date),
                    tenancy.break_type.value if tenancy.break_type else None,
                    to_iso(tenancy.rent_review_date),
                    tenancy.rent_review_type.value if tenancy.rent_review_type else None,
                    tenancy.reminder_settings.model_dump_json(),
                    1 if tenancy.is_archived else 0,
                    1 if tenancy.is_deleted else 0,
                    to_iso(tenancy.deleted_at),
                    to_iso(tenancy.updated_at),
                    tenancy.id,
                ),
            )
        logger.info("tenancy_updated", tenancy_id=tenancy.id)
        return tenancy

    async def list(
        self, include_archived: bool = False, include_deleted: bool = False
    ) -> list[Tenancy]:
        where = visibility_clause(include_archived, include_deleted)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM tenancies WHERE {where} ORDER BY lease_end_date, id"
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def list_by_unit(self, unit_id: str) -> list[Tenancy]:
        """List a unit's tenancies, archived included, recycle bin excluded."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM tenancies
                WHERE unit_id = ? AND is_deleted = 0
                ORDER BY lease_start_date DESC, id
                """,
                (unit_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def list_deleted(self) -> list[Tenancy]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM tenancies WHERE is_deleted = 1 ORDER BY deleted_at ASC"
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def archive(self, tenancy_id: str) -> bool:
        """Archive a tenancy, terminating it and freeing its unit."""
        stamp = to_iso(utc_now())
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE tenancies SET is_archived = 1, status = ?, updated_at = ?
                WHERE id = ?
                """,
                (TenancyStatus.TERMINATED.value, stamp, tenancy_id),
            )
            archived = cursor.rowcount > 0
            if archived:
                await _set_unit_status(conn, tenancy_id, UnitStatus.VACANT, stamp)
        if archived:
            logger.info("tenancy_archived", tenancy_id=tenancy_id)
        return archived

    async def restore(self, tenancy_id: str) -> bool:
        """
        Restore a tenancy from the recycle bin or the archive.

        Either way the tenancy becomes active again and its unit occupied.
        """
        stamp = to_iso(utc_now())
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE tenancies SET
                    is_archived = CASE WHEN is_deleted = 1 THEN is_archived ELSE 0 END,
                    is_deleted = 0, deleted_at = NULL, status = ?, updated_at = ?
                WHERE id = ?
                """,
                (TenancyStatus.ACTIVE.value, stamp, tenancy_id),
            )
            restored = cursor.rowcount > 0
            if restored:
                await _set_unit_status(conn, tenancy_id, UnitStatus.OCCUPIED, stamp)
        if restored:
            logger.info("tenancy_restored", tenancy_id=tenancy_id)
        return restored

    async def soft_delete(self, tenancy_id: str, deleted_at: datetime) -> bool:
        """Move a tenancy to the recycle bin, terminating it and freeing its unit."""
        stamp = to_iso(utc_now())
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE tenancies SET is_deleted = 1, deleted_at = ?, status = ?, updated_at = ?
                WHERE id = ?
                """,
                (to_iso(deleted_at), TenancyStatus.TERMINATED.value, stamp, tenancy_id),
            )
            deleted = cursor.rowcount > 0
            if deleted:
                await _set_unit_status(conn, tenancy_id, UnitStatus.VACANT, stamp)
        if deleted:
            logger.info("tenancy_soft_deleted", tenancy_id=tenancy_id)
        return deleted

    async def delete(self, tenancy_id: str) -> bool:
        """Permanently delete a tenancy and free its unit."""
        async with get_transaction() as conn:
            # Unit first: the lookup needs the tenancy row
            await _set_unit_status(conn, tenancy_id, UnitStatus.VACANT, to_iso(utc_now()))
            cursor = await conn.execute("DELETE FROM tenancies WHERE id = ?", (tenancy_id,))
            deleted = cursor.rowcount > 0
        if deleted:
            logger.info("tenancy_deleted", tenancy_id=tenancy_id)
        return deleted

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Tenancy:
        """Convert a database row to a Tenancy entity."""
        settings = ReminderSettings()
        if row["reminder_settings"]:
            try:
                settings = ReminderSettings.model_validate(json.loads(row["reminder_settings"]))
            except ValueError:
                logger.warning("tenancy_reminder_settings_invalid", tenancy_id=row["id"])

        return Tenancy(
            id=row["id"],
            unit_id=row["unit_id"],
            tenant_name=row["tenant_name"],
            tenant_email=row["tenant_email"],
            tenant_phone=row["tenant_phone"],
            lease_start_date=parse_date(row["lease_start_date"]),
            lease_end_date=parse_date(row["lease_end_date"]),
            monthly_rent=row["monthly_rent"] or 0.0,
            security_deposit=row["security_deposit"],
            status=TenancyStatus(row["status"]),
            notes=row["notes"],
            break_date=parse_date(row["break_date"]),
            break_type=BreakType(row["break_type"]) if row["break_type"] else None,
            rent_review_date=parse_date(row["rent_review_date"]),
            rent_review_type=(
                RentReviewType(row["rent_review_type"]) if row["rent_review_type"] else None
            ),
            reminder_settings=settings,
            is_archived=bool(row["is_archived"]),
            is_deleted=bool(row["is_deleted"]),
            deleted_at=parse_datetime(row["deleted_at"]),
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
