"""
SQLite implementation of the diary overlay store.

Each document is one row holding a versioned JSON body:
{"version": 1, "entries": {"<event id>": {...}}}
"""

from __future__ import annotations

import json
from typing import Any

from propdiary.config import get_logger
from propdiary.core.entities.base import utc_now
from propdiary.core.interfaces.storage import IOverlayStore
from propdiary.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from propdiary.infrastructure.storage.sqlite.rows import to_iso

logger = get_logger(__name__)

OVERLAY_FORMAT_VERSION = 1


def encode_document(entries: dict[str, dict[str, Any]]) -> str:
    return json.dumps(
        {"version": OVERLAY_FORMAT_VERSION, "entries": entries},
        sort_keys=True,
        default=str,
    )


def decode_document(name: str, body: str) -> dict[str, dict[str, Any]]:
    """
    Parse a stored document body.

    Unparseable JSON, an unknown version or a malformed layout loads as an
    empty document; the failure is logged, never raised.
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        logger.warning("overlay_parse_failed", document=name, error=str(e))
        return {}

    if not isinstance(data, dict) or data.get("version") != OVERLAY_FORMAT_VERSION:
        logger.warning(
            "overlay_version_unsupported",
            document=name,
            version=data.get("version") if isinstance(data, dict) else None,
        )
        return {}

    entries = data.get("entries")
    if not isinstance(entries, dict):
        logger.warning("overlay_parse_failed", document=name, error="entries is not an object")
        return {}

    return {k: v for k, v in entries.items() if isinstance(v, dict)}


class SQLiteOverlayStore(IOverlayStore):
    """SQLite implementation of the overlay document store."""

    async def load(self, name: str) -> dict[str, dict[str, Any]]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT body FROM overlay_documents WHERE name = ?", (name,)
            )
            row = await cursor.fetchone()
        if row is None:
            return {}
        return decode_document(name, row["body"])

    async def save(self, name: str, entries: dict[str, dict[str, Any]]) -> None:
        """Replace the whole document."""
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO overlay_documents (name, body, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    body = excluded.body,
                    updated_at = excluded.updated_at
                """,
                (name, encode_document(entries), to_iso(utc_now())),
            )
        logger.debug("overlay_saved", document=name, entries=len(entries))
