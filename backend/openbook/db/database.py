import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import aiosqlite

from openbook.core.config import settings
from openbook.db.schema import ALL_TABLES, INDEXES
from openbook.db.migrations import run_migrations as run_db_migrations

logger = logging.getLogger(__name__)


class Database:
    def __init__(self):
        # Default to config path, tests point it at a temporary file
        self.db_path = settings.database_path
        self._connection: Optional[aiosqlite.Connection] = None
        self._current_path: Optional[str] = None
        self._write_lock: Optional[asyncio.Lock] = None

    async def set_db_path(self, new_path: str):
        """Switch to a different database path"""
        if self.db_path != new_path:
            self.db_path = new_path
            if self._connection:
                await self.disconnect()
            self._current_path = None

    async def connect(self):
        """Create database connection"""
        # If we have a connection but path changed, close it first
        if self._connection and self._current_path != self.db_path:
            await self.disconnect()

        if not self._connection:
            directory = os.path.dirname(self.db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
            await self._connection.execute("PRAGMA foreign_keys = ON")
            self._current_path = self.db_path
            self._write_lock = asyncio.Lock()
            logger.info(f"Connected to SQLite database at {self.db_path}")

    async def disconnect(self):
        """Close database connection"""
        if self._connection:
            await self._connection.close()
            self._connection = None
            logger.info("Database connection closed")

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def execute(self, query: str, params: tuple = ()):
        """Execute a query"""
        if not self._connection or self._current_path != self.db_path:
            await self.connect()
        return await self._connection.execute(query, params)

    async def execute_many(self, query: str, params: list[tuple]):
        """Execute many queries"""
        if not self._connection or self._current_path != self.db_path:
            await self.connect()
        return await self._connection.executemany(query, params)

    async def fetch_one(self, query: str, params: tuple = ()):
        """Fetch one row"""
        cursor = await self.execute(query, params)
        row = await cursor.fetchone()
        return dict(row) if row else None

    async def fetch_all(self, query: str, params: tuple = ()):
        """Fetch all rows"""
        cursor = await self.execute(query, params)
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def commit(self):
        """Commit transaction"""
        if self._connection:
            await self._connection.commit()

    async def rollback(self):
        """Rollback transaction"""
        if self._connection:
            await self._connection.rollback()

    @asynccontextmanager
    async def transaction(self):
        """
        Run a group of writes atomically.

        Writers are serialized so that statements of two requests sharing the
        connection never end up in the same commit.
        """
        if not self._connection or self._current_path != self.db_path:
            await self.connect()

        async with self._write_lock:
            try:
                yield self
                await self.commit()
            except BaseException:
                await self.rollback()
                raise


# Global database instance
db = Database()


def get_db() -> Database:
    """Get the current database instance - use this for all database operations"""
    return db


async def create_tables():
    """Create all database tables"""
    for table_sql in ALL_TABLES:
        await db.execute(table_sql)

    for index_sql in INDEXES:
        await db.execute(index_sql)

    await db.commit()


async def run_migrations():
    """Run database migrations"""
    await run_db_migrations(db)


async def init_db():
    """Initialize database with schema, migrations and default data"""
    from openbook.db.seed import seed_default_data

    await db.connect()

    await create_tables()
    await run_migrations()

    if settings.SEED_DEFAULT_DATA:
        await seed_default_data()

    logger.info("Database initialized successfully")


async def close_db():
    await db.disconnect()
