#!/usr/bin/env python3
"""
Migration Runner

Creates the schema, applies pending migrations and seeds the default tags,
permissions and pages into the configured database.
"""

import asyncio
import sys
from pathlib import Path

# Add the backend directory to Python path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from openbook.core.config import settings
from openbook.db.database import close_db, init_db
from openbook.db.migrations import get_current_version


async def run_migration() -> int:
    try:
        await init_db()
        return await get_current_version()
    finally:
        await close_db()


if __name__ == "__main__":
    print("=== Open Book Wiki Database Migration ===")
    print(f"Database: {settings.database_path}")
    print()

    version = asyncio.run(run_migration())
    print(f"Migration completed, schema version {version}")
