from fastapi import APIRouter
from datetime import datetime
import logging

import aiosqlite

from openbook.api.schemas import HealthResponse
from openbook.db.database import get_db
from openbook.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check():
    """Health check endpoint with a database probe"""
    db = get_db()
    database_status = "disconnected"
    if db.is_connected:
        try:
            # Test database connection
            await db.fetch_one("SELECT 1")
            database_status = "connected"
        except aiosqlite.Error as e:
            logger.warning(f"Database probe failed: {e}")

    return HealthResponse(
        status="healthy" if database_status == "connected" else "unhealthy",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        timestamp=datetime.now().isoformat(),
        database=database_status
    )
