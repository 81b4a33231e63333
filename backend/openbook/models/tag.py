from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from .base import parse_timestamp, format_timestamp


ADMINISTRATOR_TAG = "Administrator"
CONTRIBUTOR_TAG = "Contributor"
VISITOR_TAG = "Visitor"
GUEST_TAG = "Unauthenticated User"

# Tags that can never be renamed or deleted
SYSTEM_TAGS = (ADMINISTRATOR_TAG, CONTRIBUTOR_TAG, VISITOR_TAG, GUEST_TAG)


@dataclass
class Tag:
    """Coloured label grouping permissions"""
    id: Optional[int] = None
    name: str = ""
    color: str = "#3B82F6"
    created_at: Optional[datetime] = None
    is_system: bool = False
    permissions: Optional[List[Dict[str, Any]]] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "isSystem": self.is_system,
            "createdAt": format_timestamp(self.created_at),
        }
        if self.permissions is not None:
            data["permissions"] = self.permissions
        return data

    @classmethod
    def from_dict(cls, data: dict):
        """Create Tag from database row"""
        return cls(
            id=data["id"],
            name=data["name"],
            color=data["color"],
            created_at=parse_timestamp(data.get("created_at")),
            is_system=data["name"] in SYSTEM_TAGS,
        )
