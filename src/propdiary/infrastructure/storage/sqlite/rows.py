"""Column conversions shared by the SQLite record stores."""

from datetime import date, datetime

from propdiary.core.entities.base import as_utc


def to_iso(value: date | datetime | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    return value.isoformat()


def parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    return as_utc(datetime.fromisoformat(value))


def parse_date(value: str | None) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value)


def visibility_clause(include_archived: bool, include_deleted: bool, alias: str = "") -> str:
    """WHERE fragment hiding archived and/or soft-deleted rows."""
    prefix = f"{alias}." if alias else ""
    conditions = ["1 = 1"]
    if not include_archived:
        conditions.append(f"{prefix}is_archived = 0")
    if not include_deleted:
        conditions.append(f"{prefix}is_deleted = 0")
    return " AND ".join(conditions)
