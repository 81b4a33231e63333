from .auth import router as auth_router
from .wiki import router as wiki_router
from .tags import router as tags_router
from .permissions import router as permissions_router
from .comments import router as comments_router
from .activities import router as activities_router
from .export import router as export_router
from .health import router as health_router

__all__ = [
    "auth_router",
    "wiki_router",
    "tags_router",
    "permissions_router",
    "comments_router",
    "activities_router",
    "export_router",
    "health_router"
]
