from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from .base import parse_timestamp, format_timestamp


@dataclass
class Comment:
    """Comment on a wiki page, optionally replying to another comment"""
    id: Optional[int] = None
    page_id: Optional[int] = None
    user_id: Optional[int] = None
    content: str = ""
    parent_id: Optional[int] = None
    username: Optional[str] = None
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    replies: List["Comment"] = field(default_factory=list)

    def to_dict(self, include_replies: bool = False) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "pageId": self.page_id,
            "userId": self.user_id,
            "content": self.content,
            "parentId": self.parent_id,
            "username": self.username,
            "avatar": self.avatar,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }
        if include_replies:
            data["replies"] = [reply.to_dict(include_replies=True) for reply in self.replies]
        return data

    @classmethod
    def from_dict(cls, data: dict):
        """Create Comment from database row"""
        return cls(
            id=data["id"],
            page_id=data["page_id"],
            user_id=data["user_id"],
            content=data["content"],
            parent_id=data.get("parent_id"),
            username=data.get("username"),
            avatar=data.get("avatar"),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )


def build_comment_tree(comments: List[Comment]) -> List[Comment]:
    """Nest replies under their parents, keeping the incoming order at each level"""
    by_id = {comment.id: comment for comment in comments}
    roots = []
    for comment in comments:
        comment.replies = []
    for comment in comments:
        parent = by_id.get(comment.parent_id) if comment.parent_id else None
        if parent is not None:
            parent.replies.append(comment)
        else:
            roots.append(comment)
    return roots
