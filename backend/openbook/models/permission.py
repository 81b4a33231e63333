from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any

from .base import parse_timestamp, format_timestamp


@dataclass
class Permission:
    """A named capability granted through tags"""
    id: Optional[int] = None
    name: str = ""
    description: Optional[str] = None
    category: str = "general"
    created_at: Optional[datetime] = None
    tag_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "createdAt": format_timestamp(self.created_at),
        }
        if self.tag_count is not None:
            data["tagCount"] = self.tag_count
        return data

    @classmethod
    def from_dict(cls, data: dict):
        """Create Permission from database row"""
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description"),
            category=data.get("category") or "general",
            created_at=parse_timestamp(data.get("created_at")),
            tag_count=data.get("tag_count"),
        )
