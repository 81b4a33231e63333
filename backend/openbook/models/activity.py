from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any
import json

from .base import parse_timestamp, format_timestamp


@dataclass
class Activity:
    """Append-only activity log record"""
    id: Optional[int] = None
    user_id: Optional[int] = None
    type: str = ""
    title: str = ""
    description: Optional[str] = None
    icon: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    username: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "username": self.username,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "metadata": self.metadata,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: dict):
        """Create Activity from database row"""
        metadata = data.get("metadata")
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            type=data["type"],
            title=data["title"],
            description=data.get("description"),
            icon=data.get("icon"),
            metadata=json.loads(metadata) if metadata else {},
            username=data.get("username"),
            created_at=parse_timestamp(data.get("created_at")),
        )
