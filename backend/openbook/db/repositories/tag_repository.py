from typing import List, Optional

from openbook.db.database import get_db
from openbook.models.tag import Tag
from openbook.models.permission import Permission


class TagRepository:
    """Repository for tags and their permission grants"""

    @staticmethod
    async def list_all() -> List[Tag]:
        db = get_db()
        rows = await db.fetch_all("SELECT * FROM tags ORDER BY name")
        return [Tag.from_dict(row) for row in rows]

    @staticmethod
    async def get_by_id(tag_id: int) -> Optional[Tag]:
        db = get_db()
        row = await db.fetch_one("SELECT * FROM tags WHERE id = ?", (tag_id,))
        return Tag.from_dict(row) if row else None

    @staticmethod
    async def get_by_name(name: str) -> Optional[Tag]:
        db = get_db()
        row = await db.fetch_one("SELECT * FROM tags WHERE name = ?", (name,))
        return Tag.from_dict(row) if row else None

    @staticmethod
    async def get_existing_names(names: List[str]) -> List[str]:
        """Return the subset of names that are real tags"""
        if not names:
            return []
        db = get_db()
        placeholders = ", ".join(["?" for _ in names])
        rows = await db.fetch_all(
            f"SELECT name FROM tags WHERE name IN ({placeholders})", tuple(names)
        )
        return [row["name"] for row in rows]

    @staticmethod
    async def create(name: str, color: str) -> Tag:
        db = get_db()
        async with db.transaction():
            cursor = await db.execute(
                "INSERT INTO tags (name, color) VALUES (?, ?)", (name, color)
            )
        return await TagRepository.get_by_id(cursor.lastrowid)

    @staticmethod
    async def update(tag_id: int, name: str, color: str) -> Optional[Tag]:
        db = get_db()
        async with db.transaction():
            await db.execute(
                "UPDATE tags SET name = ?, color = ? WHERE id = ?", (name, color, tag_id)
            )
        return await TagRepository.get_by_id(tag_id)

    @staticmethod
    async def delete(tag_id: int) -> bool:
        """Delete a tag; its grants and user assignments cascade"""
        db = get_db()
        async with db.transaction():
            cursor = await db.execute("DELETE FROM tags WHERE id = ?", (tag_id,))
        return cursor.rowcount > 0

    @staticmethod
    async def get_permissions_for_tag(tag_id: int) -> List[Permission]:
        db = get_db()
        rows = await db.fetch_all(
            """SELECT p.* FROM permissions p
               JOIN tag_permissions tp ON tp.permission_id = p.id
               WHERE tp.tag_id = ?
               ORDER BY p.category, p.name""",
            (tag_id,)
        )
        return [Permission.from_dict(row) for row in rows]

    @staticmethod
    async def list_with_permissions() -> List[Tag]:
        """Every tag with its granted permissions nested"""
        db = get_db()
        tags = await TagRepository.list_all()
        rows = await db.fetch_all(
            """SELECT tp.tag_id, p.* FROM tag_permissions tp
               JOIN permissions p ON p.id = tp.permission_id
               ORDER BY p.category, p.name"""
        )
        grants = {}
        for row in rows:
            tag_id = row.pop("tag_id")
            grants.setdefault(tag_id, []).append(Permission.from_dict(row).to_dict())
        for tag in tags:
            tag.permissions = grants.get(tag.id, [])
        return tags

    @staticmethod
    async def replace_permissions(tag_id: int, permission_ids: List[int]):
        """Replace the tag's grants; a failure leaves the previous grants intact"""
        db = get_db()
        async with db.transaction():
            await db.execute("DELETE FROM tag_permissions WHERE tag_id = ?", (tag_id,))
            await db.execute_many(
                "INSERT INTO tag_permissions (tag_id, permission_id) VALUES (?, ?)",
                [(tag_id, permission_id) for permission_id in dict.fromkeys(permission_ids)]
            )
