from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any

from .base import parse_timestamp, format_timestamp


@dataclass
class WikiPage:
    """Live version of a wiki page"""
    id: Optional[int] = None
    title: str = ""
    content: str = ""
    author_id: Optional[int] = None
    author_username: Optional[str] = None
    is_protected: bool = False
    comments_enabled: bool = False
    icon: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self, include_content: bool = True) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "authorId": self.author_id,
            "author": self.author_username,
            "isProtected": self.is_protected,
            "commentsEnabled": self.comments_enabled,
            "icon": self.icon,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }
        if include_content:
            data["content"] = self.content
        return data

    @classmethod
    def from_dict(cls, data: dict):
        """Create WikiPage from database row"""
        return cls(
            id=data["id"],
            title=data["title"],
            content=data.get("content") or "",
            author_id=data.get("author_id"),
            author_username=data.get("author_username"),
            is_protected=bool(data.get("is_protected")),
            comments_enabled=bool(data.get("comments_enabled")),
            icon=data.get("icon"),
            created_at=parse_timestamp(data.get("created_at")),
            updated_at=parse_timestamp(data.get("updated_at")),
        )


@dataclass
class WikiPageHistory:
    """Archived (title, content) of a page, written before each update"""
    id: Optional[int] = None
    page_id: Optional[int] = None
    title: str = ""
    content: Optional[str] = None
    changed_by: Optional[int] = None
    changed_by_username: Optional[str] = None
    change_reason: Optional[str] = None
    changed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "pageId": self.page_id,
            "title": self.title,
            "changedBy": self.changed_by,
            "author": self.changed_by_username,
            "changeReason": self.change_reason,
            "changedAt": format_timestamp(self.changed_at),
        }
        # Lightweight history listings carry no content
        if self.content is not None:
            data["content"] = self.content
        return data

    @classmethod
    def from_dict(cls, data: dict):
        """Create WikiPageHistory from database row"""
        return cls(
            id=data["id"],
            page_id=data.get("page_id"),
            title=data["title"],
            content=data.get("content"),
            changed_by=data.get("changed_by"),
            changed_by_username=data.get("changed_by_username"),
            change_reason=data.get("change_reason"),
            changed_at=parse_timestamp(data.get("changed_at")),
        )
