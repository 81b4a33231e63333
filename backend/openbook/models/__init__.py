from .user import User
from .tag import Tag, SYSTEM_TAGS
from .permission import Permission
from .wiki_page import WikiPage, WikiPageHistory
from .comment import Comment, build_comment_tree
from .activity import Activity

__all__ = [
    "User",
    "Tag",
    "SYSTEM_TAGS",
    "Permission",
    "WikiPage",
    "WikiPageHistory",
    "Comment",
    "build_comment_tree",
    "Activity"
]
