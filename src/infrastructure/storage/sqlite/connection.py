"""
Async SQLite connection pool with aiosqlite.

A small fixed set of connections is opened on first use and handed out
through a queue. Write transactions start with ``BEGIN IMMEDIATE`` so two
requests saving invoices for the same tenant serialize on the write lock
instead of failing halfway; the UNIQUE constraint on invoice numbers then
decides who wins.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings
from src.core.exceptions import DatabaseError

logger = get_logger(__name__)

# Applied to every new connection, in order
CONNECTION_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    # invoice_items cascade and customer RESTRICT rely on this
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """Bounded pool of aiosqlite connections to one database file."""

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
    ):
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._all: list[aiosqlite.Connection] = []
        self._ready = False
        self._lock = asyncio.Lock()

    @property
    def in_use(self) -> int:
        """Connections currently lent out."""
        return len(self._all) - self._idle.qsize()

    async def initialize(self) -> None:
        async with self._lock:
            if self._ready:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                for _ in range(self.pool_size):
                    conn = await self._open()
                    self._all.append(conn)
                    self._idle.put_nowait(conn)
            except aiosqlite.Error as e:
                await self._close_all()
                raise DatabaseError("connect", str(e)) from e

            self._ready = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _open(self) -> aiosqlite.Connection:
        # isolation_level=None: transactions are opened explicitly below
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)
        await conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout)}")
        for pragma in CONNECTION_PRAGMAS:
            await conn.execute(pragma)
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection for reads.

        Usage:
            async with pool.acquire() as conn:
                cursor = await conn.execute(...)
        """
        if not self._ready:
            await self.initialize()

        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection inside a write transaction.

        Commits when the block exits normally and rolls back on any
        exception. Integrity errors propagate unchanged so stores can turn
        them into domain errors; other SQLite failures become
        ``DatabaseError``.
        """
        async with self.acquire() as conn:
            try:
                await conn.execute("BEGIN IMMEDIATE")
            except aiosqlite.OperationalError as e:
                raise DatabaseError("begin", str(e)) from e

            try:
                yield conn
            except aiosqlite.IntegrityError:
                await conn.rollback()
                raise
            except aiosqlite.OperationalError as e:
                await conn.rollback()
                logger.error("transaction_failed", error=str(e))
                raise DatabaseError("write", str(e)) from e
            except BaseException:
                await conn.rollback()
                raise
            else:
                await conn.commit()

    async def ping(self) -> None:
        """Round-trip a trivial query; raises DatabaseError when it fails."""
        try:
            async with self.acquire() as conn:
                await conn.execute("SELECT 1")
        except aiosqlite.Error as e:
            raise DatabaseError("ping", str(e)) from e

    async def _close_all(self) -> None:
        for conn in self._all:
            await conn.close()
        self._all.clear()
        self._idle = asyncio.Queue(maxsize=self.pool_size)

    async def close(self) -> None:
        async with self._lock:
            await self._close_all()
            self._ready = False
            logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool, created from storage settings on first use."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
        )
        await pool.initialize()
        _pool = pool
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        pool, _pool = _pool, None
        await pool.close()


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


def like_pattern(term: str) -> str:
    """Substring pattern for ``LIKE ? ESCAPE '\\'`` with wildcards taken literally."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
