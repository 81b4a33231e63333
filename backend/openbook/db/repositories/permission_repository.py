from typing import List, Optional, Set

from openbook.db.database import get_db
from openbook.models.permission import Permission


class PermissionRepository:
    """Repository for the permission catalogue"""

    @staticmethod
    async def list_all() -> List[Permission]:
        """All permissions with the number of tags granting each"""
        db = get_db()
        rows = await db.fetch_all(
            """SELECT p.*, COUNT(tp.tag_id) as tag_count
               FROM permissions p
               LEFT JOIN tag_permissions tp ON tp.permission_id = p.id
               GROUP BY p.id
               ORDER BY p.category, p.name"""
        )
        return [Permission.from_dict(row) for row in rows]

    @staticmethod
    async def get_by_id(permission_id: int) -> Optional[Permission]:
        db = get_db()
        row = await db.fetch_one("SELECT * FROM permissions WHERE id = ?", (permission_id,))
        return Permission.from_dict(row) if row else None

    @staticmethod
    async def get_by_name(name: str) -> Optional[Permission]:
        db = get_db()
        row = await db.fetch_one("SELECT * FROM permissions WHERE name = ?", (name,))
        return Permission.from_dict(row) if row else None

    @staticmethod
    async def get_by_name_excluding_id(name: str, permission_id: int) -> Optional[Permission]:
        db = get_db()
        row = await db.fetch_one(
            "SELECT * FROM permissions WHERE name = ? AND id != ?", (name, permission_id)
        )
        return Permission.from_dict(row) if row else None

    @staticmethod
    async def get_existing_ids(permission_ids: List[int]) -> Set[int]:
        if not permission_ids:
            return set()
        db = get_db()
        placeholders = ", ".join(["?" for _ in permission_ids])
        rows = await db.fetch_all(
            f"SELECT id FROM permissions WHERE id IN ({placeholders})", tuple(permission_ids)
        )
        return {row["id"] for row in rows}

    @staticmethod
    async def create(name: str, description: Optional[str], category: str = "general") -> Permission:
        db = get_db()
        async with db.transaction():
            cursor = await db.execute(
                "INSERT INTO permissions (name, description, category) VALUES (?, ?, ?)",
                (name, description, category)
            )
        return await PermissionRepository.get_by_id(cursor.lastrowid)

    @staticmethod
    async def update(permission_id: int, name: str, description: Optional[str],
                     category: str = "general") -> Optional[Permission]:
        db = get_db()
        async with db.transaction():
            await db.execute(
                "UPDATE permissions SET name = ?, description = ?, category = ? WHERE id = ?",
                (name, description, category, permission_id)
            )
        return await PermissionRepository.get_by_id(permission_id)

    @staticmethod
    async def delete(permission_id: int) -> bool:
        db = get_db()
        async with db.transaction():
            cursor = await db.execute("DELETE FROM permissions WHERE id = ?", (permission_id,))
        return cursor.rowcount > 0

    @staticmethod
    async def list_names() -> Set[str]:
        db = get_db()
        rows = await db.fetch_all("SELECT name FROM permissions")
        return {row["name"] for row in rows}

    @staticmethod
    async def get_names_for_user(user_id: int) -> Set[str]:
        """Union of the permissions granted by every tag of the user"""
        db = get_db()
        rows = await db.fetch_all(
            """SELECT DISTINCT p.name FROM user_tags ut
               JOIN tag_permissions tp ON tp.tag_id = ut.tag_id
               JOIN permissions p ON p.id = tp.permission_id
               WHERE ut.user_id = ?""",
            (user_id,)
        )
        return {row["name"] for row in rows}

    @staticmethod
    async def get_names_for_tag_name(tag_name: str) -> Set[str]:
        db = get_db()
        rows = await db.fetch_all(
            """SELECT DISTINCT p.name FROM tags t
               JOIN tag_permissions tp ON tp.tag_id = t.id
               JOIN permissions p ON p.id = tp.permission_id
               WHERE t.name = ?""",
            (tag_name,)
        )
        return {row["name"] for row in rows}
