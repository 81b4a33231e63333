from fastapi import APIRouter

from openbook.api.routes import (
    auth_router,
    wiki_router,
    tags_router,
    permissions_router,
    comments_router,
    activities_router,
    export_router
)
from openbook.api.schemas import ErrorResponse
from openbook.core.config import settings

# Create main API router
api_router = APIRouter(
    prefix=settings.API_PREFIX,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse}
    }
)

# Include all route modules
api_router.include_router(auth_router)
api_router.include_router(wiki_router)
api_router.include_router(tags_router)
api_router.include_router(permissions_router)
api_router.include_router(comments_router)
api_router.include_router(activities_router)
api_router.include_router(export_router)
