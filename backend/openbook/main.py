from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from openbook.core.config import settings
from openbook.api.api import api_router
from openbook.api.routes import health_router
from openbook.api.errors import (
    http_exception_handler,
    not_found_handler,
    validation_exception_handler,
    general_exception_handler
)
from openbook.db.database import init_db, close_db
from openbook.middleware.timing_middleware import RequestTimingMiddleware

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await init_db()
    logger.info(f"{settings.APP_NAME} {settings.VERSION} started ({settings.ENVIRONMENT})")

    yield

    # Shutdown
    await close_db()


app = FastAPI(
    title="Open Book Wiki API",
    description="Collaborative wiki with page history, tag-based permissions and document export",
    version=settings.VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Process-Time"]
)
app.add_middleware(RequestTimingMiddleware)

# Add exception handlers
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(404, not_found_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include API routes
app.include_router(api_router)
app.include_router(health_router)


@app.get("/")
async def root():
    return {
        "message": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "operational",
        "docs_url": "/docs",
        "endpoints": {
            "health": "/health",
            "auth": f"{settings.API_PREFIX}/auth",
            "wiki": f"{settings.API_PREFIX}/wiki",
            "tags": f"{settings.API_PREFIX}/tags",
            "permissions": f"{settings.API_PREFIX}/permissions",
            "comments": f"{settings.API_PREFIX}/comments",
            "activities": f"{settings.API_PREFIX}/activities",
            "export": f"{settings.API_PREFIX}/export"
        }
    }
