"""Unit tests for SQLite connection pool."""

import asyncio
from pathlib import Path

import aiosqlite
import pytest

from propdiary.infrastructure.storage.sqlite import connection
from propdiary.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool.initialized is False

    async def test_initialize_creates_directory(self, tmp_path: Path):
        """Initialize creates database directory if not exists."""
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    async def test_initialize_idempotent(self, temp_db_path: Path):
        """Multiple initialize calls are safe."""
        pool = ConnectionPool(temp_db_path, pool_size=2)

        await pool.initialize()
        await pool.initialize()

        assert pool.idle == 2
        await pool.close()


class TestConnectionPragmas:
    """Tests for per-connection settings."""

    async def test_wal_and_foreign_keys(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        conn = await pool.open_connection()

        cursor = await conn.execute("PRAGMA journal_mode")
        assert (await cursor.fetchone())[0].lower() == "wal"
        cursor = await conn.execute("PRAGMA foreign_keys")
        assert (await cursor.fetchone())[0] == 1
        assert conn.row_factory == aiosqlite.Row
        await conn.close()


class TestConnectionPoolAcquire:
    """Tests for ConnectionPool.acquire()."""

    async def test_acquire_auto_initializes(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)

        async with pool.acquire() as conn:
            assert pool.initialized is True
            assert isinstance(conn, aiosqlite.Connection)

        await pool.close()

    async def test_acquire_returns_on_exception(self, temp_db_path: Path):
        """Connection is returned even if exception occurs."""
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()

        with pytest.raises(ValueError):
            async with pool.acquire() as _conn:
                raise ValueError("Test error")

        assert pool.idle == 1
        await pool.close()

    async def test_acquire_blocks_when_pool_exhausted(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()

        async with pool.acquire() as _conn1:
            with pytest.raises(asyncio.TimeoutError):
                async with asyncio.timeout(0.1):
                    async with pool.acquire() as _conn2:
                        pass

        await pool.close()


class TestConnectionPoolTransaction:
    """Tests for ConnectionPool.transaction()."""

    async def test_transaction_commits_on_success(self, db_pool: ConnectionPool):
        async with db_pool.transaction() as conn:
            await conn.execute(
                "INSERT INTO overlay_documents (name, body, updated_at) VALUES (?, ?, ?)",
                ("doc", "{}", "2025-01-01T00:00:00+00:00"),
            )

        async with db_pool.acquire() as conn:
            cursor = await conn.execute("SELECT body FROM overlay_documents WHERE name = 'doc'")
            row = await cursor.fetchone()
            assert row["body"] == "{}"

    async def test_transaction_rolls_back_on_exception(self, db_pool: ConnectionPool):
        with pytest.raises(ValueError):
            async with db_pool.transaction() as conn:
                await conn.execute(
                    "INSERT INTO overlay_documents (name, body, updated_at) VALUES (?, ?, ?)",
                    ("rollback", "{}", "2025-01-01T00:00:00+00:00"),
                )
                raise ValueError("Force rollback")

        async with db_pool.acquire() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM overlay_documents WHERE name = 'rollback'"
            )
            assert (await cursor.fetchone())[0] == 0


class TestConnectionPoolPing:
    """Tests for ConnectionPool.ping()."""

    async def test_ping_ok(self, db_pool: ConnectionPool):
        assert await db_pool.ping() is True

    async def test_ping_unreachable(self, tmp_path: Path):
        """A database path that is a directory cannot be opened."""
        blocker = tmp_path / "blocker"
        blocker.mkdir()
        pool = ConnectionPool(blocker, pool_size=1)

        assert await pool.ping() is False


class TestWriteLock:
    """Transactions take the write lock when they begin."""

    async def test_second_writer_waits_for_busy_timeout(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=50)

        async with pool.transaction():
            with pytest.raises(aiosqlite.OperationalError, match="locked"):
                async with pool.transaction():
                    pass

        await pool.close()


class TestConnectionPoolClose:
    """Tests for ConnectionPool.close()."""

    async def test_close_resets_pool(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2)
        await pool.initialize()

        await pool.close()

        assert pool.initialized is False
        assert pool.idle == 0

    async def test_reopen_after_close(self, temp_db_path: Path):
        """A closed pool hands out fresh connections on next use."""
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()
        await pool.close()

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT 1")
            assert (await cursor.fetchone())[0] == 1

        await pool.close()

    async def test_close_safe_when_not_initialized(self, temp_db_path: Path):
        await ConnectionPool(temp_db_path, pool_size=1).close()


class TestGlobalPool:
    """Tests for the module-level pool helpers."""

    async def test_get_pool_uses_settings(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
        monkeypatch.setattr(connection, "_pool", None)

        pool = await get_pool()

        assert pool is await get_pool()
        assert pool.db_path == tmp_path / "data" / "propdiary.db"
        await close_pool()
        assert connection._pool is None

    async def test_close_pool_safe_when_none(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(connection, "_pool", None)
        await close_pool()

    async def test_get_connection_and_transaction(self, db_pool: ConnectionPool):
        async with get_transaction() as conn:
            await conn.execute(
                "INSERT INTO overlay_documents (name, body, updated_at) VALUES (?, ?, ?)",
                ("txn", "{}", "2025-01-01T00:00:00+00:00"),
            )

        async with get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM overlay_documents")
            assert (await cursor.fetchone())[0] == 1
