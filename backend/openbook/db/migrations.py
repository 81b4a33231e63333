"""Database migration system"""
import logging
from datetime import datetime
from typing import List, Tuple

import aiosqlite

logger = logging.getLogger(__name__)


# Migration format: (version, description, up_sql, down_sql)
MIGRATIONS: List[Tuple[int, str, str, str]] = [
    (
        1,
        "Initial schema",
        """-- This migration is handled by schema.py create_tables()""",
        """-- Rollback not supported for initial schema"""
    ),
    (
        2,
        "Add icon and comments_enabled columns to wiki_pages",
        """ALTER TABLE wiki_pages ADD COLUMN icon TEXT;
ALTER TABLE wiki_pages ADD COLUMN comments_enabled BOOLEAN DEFAULT FALSE""",
        """ALTER TABLE wiki_pages DROP COLUMN icon;
ALTER TABLE wiki_pages DROP COLUMN comments_enabled"""
    ),
    (
        3,
        "Add bio and avatar columns to users",
        """ALTER TABLE users ADD COLUMN bio TEXT DEFAULT '';
ALTER TABLE users ADD COLUMN avatar TEXT DEFAULT '/avatars/avatar-openbookwiki.svg'""",
        """ALTER TABLE users DROP COLUMN bio;
ALTER TABLE users DROP COLUMN avatar"""
    ),
    (
        4,
        "Add change_reason column to wiki_page_history",
        """ALTER TABLE wiki_page_history ADD COLUMN change_reason TEXT""",
        """ALTER TABLE wiki_page_history DROP COLUMN change_reason"""
    ),
]

# Errors that only mean the statement was already applied by create_tables()
ALREADY_APPLIED_PHRASES = (
    "duplicate column name",
    "table already exists",
    "index already exists",
    "column already exists",
)


async def get_current_version(db=None) -> int:
    """Get current schema version"""
    if db is None:
        from openbook.db.database import get_db
        db = get_db()
    try:
        result = await db.fetch_one(
            "SELECT MAX(version) as version FROM schema_version"
        )
    except aiosqlite.OperationalError:
        # Table doesn't exist yet
        return 0
    return result["version"] if result and result["version"] else 0


async def apply_migration(db, version: int, description: str, up_sql: str):
    """Apply a single migration"""
    if up_sql.strip() and not up_sql.strip().startswith("--"):
        statements = [stmt.strip() for stmt in up_sql.split(';') if stmt.strip()]
        for statement in statements:
            if statement.startswith('--'):
                continue
            try:
                await db.execute(statement)
            except aiosqlite.OperationalError as e:
                error_msg = str(e).lower()
                if any(phrase in error_msg for phrase in ALREADY_APPLIED_PHRASES):
                    logger.debug(f"Migration {version}: skipping statement (already exists): {statement}")
                    continue
                logger.error(f"Migration {version} failed on statement: {statement}: {e}")
                raise

    await db.execute(
        "INSERT INTO schema_version (version, applied_at, description) VALUES (?, ?, ?)",
        (version, datetime.now().isoformat(), description)
    )
    await db.commit()
    logger.info(f"Applied migration {version}: {description}")


async def run_migrations(db=None):
    """Run all pending migrations"""
    if db is None:
        from openbook.db.database import get_db
        db = get_db()
    current_version = await get_current_version(db)

    for version, description, up_sql, _ in MIGRATIONS:
        if version > current_version:
            await apply_migration(db, version, description, up_sql)

    final_version = await get_current_version(db)
    if final_version > current_version:
        logger.info(f"Database migrated from version {current_version} to {final_version}")
    else:
        logger.debug(f"Database schema is up to date (version {current_version})")
