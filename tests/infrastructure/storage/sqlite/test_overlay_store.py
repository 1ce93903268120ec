"""Tests for SQLiteOverlayStore and the overlay document codec."""

import json

import pytest

from propdiary.infrastructure.storage.sqlite import SQLiteOverlayStore, get_transaction
from propdiary.infrastructure.storage.sqlite.overlay_store import (
    OVERLAY_FORMAT_VERSION,
    decode_document,
    encode_document,
)


async def _write_raw(name: str, body: str) -> None:
    async with get_transaction() as conn:
        await conn.execute(
            "INSERT OR REPLACE INTO overlay_documents (name, body, updated_at) VALUES (?, ?, ?)",
            (name, body, "2025-03-15T00:00:00+00:00"),
        )


class TestOverlayCodec:
    """Tests for encode_document / decode_document."""

    def test_encoded_document_is_versioned(self):
        body = json.loads(encode_document({"a": {"status": "pending"}}))
        assert body == {"version": OVERLAY_FORMAT_VERSION, "entries": {"a": {"status": "pending"}}}

    def test_decode_unparseable_is_empty(self):
        assert decode_document("doc", "{broken") == {}

    def test_decode_unknown_version_is_empty(self):
        assert decode_document("doc", json.dumps({"version": 99, "entries": {"a": {}}})) == {}

    def test_decode_unversioned_is_empty(self):
        assert decode_document("doc", json.dumps({"a": {"status": "pending"}})) == {}

    def test_decode_drops_non_object_entries(self):
        body = json.dumps({"version": 1, "entries": {"a": {"x": 1}, "b": "junk", "c": [1]}})
        assert decode_document("doc", body) == {"a": {"x": 1}}

    def test_decode_entries_not_object(self):
        assert decode_document("doc", json.dumps({"version": 1, "entries": []})) == {}


class TestSQLiteOverlayStore:
    """Tests for SQLiteOverlayStore."""

    @pytest.fixture(autouse=True)
    def _setup(self, db_pool):
        self.store = SQLiteOverlayStore()

    async def test_load_missing_document(self):
        assert await self.store.load("diaryEventOverlay") == {}

    async def test_save_then_load(self):
        entries = {"lease_expiry_t1": {"id": "lease_expiry_t1", "status": "in_legals"}}

        await self.store.save("diaryEventOverlay", entries)

        assert await self.store.load("diaryEventOverlay") == entries

    async def test_save_replaces_whole_document(self):
        await self.store.save("archivedDiaryEvents", {"a": {"id": "a"}, "b": {"id": "b"}})
        await self.store.save("archivedDiaryEvents", {"b": {"id": "b"}})

        assert await self.store.load("archivedDiaryEvents") == {"b": {"id": "b"}}

    async def test_documents_are_independent(self):
        await self.store.save("diaryEventOverlay", {"a": {"id": "a"}})

        assert await self.store.load("archivedDiaryEvents") == {}

    async def test_corrupt_body_loads_empty(self):
        await _write_raw("diaryEventOverlay", "not json at all")

        assert await self.store.load("diaryEventOverlay") == {}

    async def test_save_over_corrupt_body(self):
        await _write_raw("diaryEventOverlay", "not json at all")

        await self.store.save("diaryEventOverlay", {"a": {"id": "a"}})

        assert await self.store.load("diaryEventOverlay") == {"a": {"id": "a"}}
