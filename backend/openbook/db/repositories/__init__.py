from .user_repository import UserRepository
from .tag_repository import TagRepository
from .permission_repository import PermissionRepository
from .wiki_page_repository import WikiPageRepository
from .comment_repository import CommentRepository
from .activity_repository import ActivityRepository

__all__ = [
    "UserRepository",
    "TagRepository",
    "PermissionRepository",
    "WikiPageRepository",
    "CommentRepository",
    "ActivityRepository"
]
