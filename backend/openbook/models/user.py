from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from .base import parse_timestamp, format_timestamp


@dataclass
class User:
    """Wiki account"""
    id: Optional[int] = None
    username: str = ""
    email: str = ""
    password_hash: str = ""
    is_admin: bool = False
    avatar: Optional[str] = None
    bio: str = ""
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Public representation, never includes the password hash"""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "isAdmin": self.is_admin,
            "avatar": self.avatar,
            "bio": self.bio or "",
            "tags": list(self.tags),
            "lastLogin": format_timestamp(self.last_login),
            "joinDate": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict, tags: Optional[List[str]] = None):
        """Create User from database row"""
        return cls(
            id=data["id"],
            username=data["username"],
            email=data["email"],
            password_hash=data.get("password_hash", ""),
            is_admin=bool(data.get("is_admin")),
            avatar=data.get("avatar"),
            bio=data.get("bio") or "",
            created_at=parse_timestamp(data.get("created_at")),
            last_login=parse_timestamp(data.get("last_login")),
            tags=tags or [],
        )
