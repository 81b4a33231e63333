import json
from typing import List, Optional, Dict, Any, Tuple

from openbook.db.database import get_db
from openbook.models.activity import Activity


ACTIVITY_SELECT = """
SELECT a.*, u.username
FROM activities a
LEFT JOIN users u ON a.user_id = u.id
"""


class ActivityRepository:
    """Repository for the append-only activity log"""

    @staticmethod
    async def create(
        user_id: int,
        type: str,
        title: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Activity:
        db = get_db()
        async with db.transaction():
            cursor = await db.execute(
                """INSERT INTO activities (user_id, type, title, description, icon, metadata)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (user_id, type, title, description, icon, json.dumps(metadata or {}))
            )
        return await ActivityRepository.get_by_id(cursor.lastrowid)

    @staticmethod
    async def get_by_id(activity_id: int) -> Optional[Activity]:
        db = get_db()
        row = await db.fetch_one(ACTIVITY_SELECT + " WHERE a.id = ?", (activity_id,))
        return Activity.from_dict(row) if row else None

    @staticmethod
    async def list_for_user(user_id: int, limit: int = 20, offset: int = 0) -> Tuple[List[Activity], int]:
        """A page of the user's activities, newest first, with the total count"""
        db = get_db()
        rows = await db.fetch_all(
            ACTIVITY_SELECT + " WHERE a.user_id = ? ORDER BY a.created_at DESC, a.id DESC LIMIT ? OFFSET ?",
            (user_id, limit, offset)
        )
        total = await db.fetch_one(
            "SELECT COUNT(*) as count FROM activities WHERE user_id = ?", (user_id,)
        )
        return [Activity.from_dict(row) for row in rows], total["count"]

    @staticmethod
    async def list_today_for_user(user_id: int) -> List[Activity]:
        db = get_db()
        rows = await db.fetch_all(
            ACTIVITY_SELECT + """ WHERE a.user_id = ? AND date(a.created_at) = date('now')
               ORDER BY a.created_at DESC, a.id DESC""",
            (user_id,)
        )
        return [Activity.from_dict(row) for row in rows]

    @staticmethod
    async def search(user_id: int, query: str, limit: int = 50) -> List[Activity]:
        """Search the user's activities by title or description"""
        db = get_db()
        escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        rows = await db.fetch_all(
            ACTIVITY_SELECT + """ WHERE a.user_id = ? AND (a.title LIKE ? ESCAPE '\\' OR a.description LIKE ? ESCAPE '\\')
               ORDER BY a.created_at DESC, a.id DESC LIMIT ?""",
            (user_id, pattern, pattern, limit)
        )
        return [Activity.from_dict(row) for row in rows]

    @staticmethod
    async def list_all(
        limit: int = 50,
        offset: int = 0,
        exclude_type: Optional[str] = None
    ) -> Tuple[List[Activity], int]:
        """A page of every user's activities, newest first, with the total count"""
        db = get_db()
        where = ""
        params: list = []
        if exclude_type:
            where = " WHERE a.type != ?"
            params.append(exclude_type)

        rows = await db.fetch_all(
            ACTIVITY_SELECT + where + " ORDER BY a.created_at DESC, a.id DESC LIMIT ? OFFSET ?",
            tuple(params + [limit, offset])
        )
        total = await db.fetch_one(
            "SELECT COUNT(*) as count FROM activities a" + where, tuple(params)
        )
        return [Activity.from_dict(row) for row in rows], total["count"]
