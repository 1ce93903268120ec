"""
Shared aiosqlite connection pool.

Connections run in autocommit mode; writes go through `transaction()`,
which takes the database write lock up front with BEGIN IMMEDIATE so a
cascade or a unit status update never fails half way on a lock upgrade.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from propdiary.config import get_logger, get_settings

logger = get_logger(__name__)

# Applied to every connection on open, busy_timeout excluded
CONNECTION_PRAGMAS: tuple[str, ...] = (
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "foreign_keys=ON",
)


class ConnectionPool:
    """
    Fixed-size pool of SQLite connections.

    Connections are opened lazily on first use and handed out through a
    queue; `acquire` blocks while all of them are checked out.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._opened: list[aiosqlite.Connection] = []
        self._lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return bool(self._opened)

    @property
    def idle(self) -> int:
        """Connections currently waiting in the pool."""
        return self._idle.qsize()

    async def initialize(self) -> None:
        """Open `pool_size` connections; a no-op when already open."""
        async with self._lock:
            if self._opened:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await self.open_connection()
                self._opened.append(conn)
                self._idle.put_nowait(conn)

            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def open_connection(self) -> aiosqlite.Connection:
        """Open one configured connection outside the pool."""
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)
        for pragma in CONNECTION_PRAGMAS:
            await conn.execute(f"PRAGMA {pragma}")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection for reads; it is returned on exit."""
        if not self.initialized:
            await self.initialize()

        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection inside BEGIN IMMEDIATE.

        Commits when the block exits cleanly, rolls back otherwise.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def ping(self) -> bool:
        """Run a trivial query; False when the database cannot be reached."""
        try:
            async with self.acquire() as conn:
                await conn.execute("SELECT 1")
        except (aiosqlite.Error, OSError) as e:
            logger.warning("connection_pool_ping_failed", db_path=str(self.db_path), error=str(e))
            return False
        return True

    async def close(self) -> None:
        """Close every connection; the pool reopens on next use."""
        async with self._lock:
            while self._opened:
                await self._opened.pop().close()
            self._idle = asyncio.Queue(maxsize=self.pool_size)
            logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Return the process-wide pool, built from storage settings on first call."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )
    await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close and forget the process-wide pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Read connection from the process-wide pool."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Write transaction on the process-wide pool."""
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
