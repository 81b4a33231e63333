from .database import db, get_db, init_db
from .repositories import (
    UserRepository,
    TagRepository,
    PermissionRepository,
    WikiPageRepository,
    CommentRepository,
    ActivityRepository
)

__all__ = [
    "db",
    "get_db",
    "init_db",
    "UserRepository",
    "TagRepository",
    "PermissionRepository",
    "WikiPageRepository",
    "CommentRepository",
    "ActivityRepository"
]
