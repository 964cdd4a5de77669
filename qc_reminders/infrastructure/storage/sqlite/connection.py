"""
Async SQLite connection pool for the reminder database.

The pool owns the schema: the first connection it opens applies any
pending migrations before the rest of the pool is created, so a store
never sees a database without the reminders table.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from qc_reminders.config import get_logger, get_settings
from qc_reminders.core.exceptions import PersistenceError
from qc_reminders.infrastructure.storage.sqlite.migrations import apply_pending_migrations

logger = get_logger(__name__)

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


class ConnectionPool:
    """
    Fixed-size pool of aiosqlite connections to one reminder database.

    Set migrate=False to open a database as-is, without touching its schema.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        migrate: bool = True,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.migrate = migrate

        self._idle: asyncio.Queue[aiosqlite.Connection] | None = None
        self._connections: list[aiosqlite.Connection] = []
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._idle is not None

    async def _open_connection(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        for pragma in _PRAGMAS:
            await conn.execute(pragma)
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        conn.row_factory = aiosqlite.Row
        return conn

    async def _migrate(self, conn: aiosqlite.Connection) -> None:
        try:
            results = await apply_pending_migrations(conn)
        except aiosqlite.Error as e:
            raise PersistenceError("migrate", str(e)) from e

        for result in results:
            if not result.success:
                raise PersistenceError("migrate", f"v{result.version}_{result.name}: {result.error}")
        if results:
            logger.info(
                "reminder_schema_migrated",
                db_path=str(self.db_path),
                versions=[r.version for r in results],
            )

    async def initialize(self) -> None:
        """
        Open the pool, migrating the schema first when enabled.

        Raises:
            PersistenceError: A migration failed; no connection is left open.
        """
        async with self._lock:
            if self._idle is not None:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            first = await self._open_connection()
            if self.migrate:
                try:
                    await self._migrate(first)
                except Exception:
                    await first.close()
                    raise

            connections = [first]
            for _ in range(self.pool_size - 1):
                connections.append(await self._open_connection())

            idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=self.pool_size)
            for conn in connections:
                idle.put_nowait(conn)
            self._connections = connections
            self._idle = idle
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection, opening the pool on first use."""
        if self._idle is None:
            await self.initialize()
        idle = self._idle
        conn = await idle.get()
        try:
            yield conn
        finally:
            idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection; commit on success, roll back on error."""
        async with self.acquire() as conn:
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise

    async def close(self) -> None:
        async with self._lock:
            if self._idle is None:
                return
            for conn in self._connections:
                await conn.close()
            self._connections = []
            self._idle = None
            logger.info("connection_pool_closed", db_path=str(self.db_path))


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global pool over the configured reminder database."""
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
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
