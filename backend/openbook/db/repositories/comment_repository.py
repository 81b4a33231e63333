from typing import List, Optional

from openbook.db.database import get_db
from openbook.models.comment import Comment


COMMENT_SELECT = """
SELECT c.*, u.username, u.avatar
FROM comments c
JOIN users u ON c.user_id = u.id
"""


class CommentRepository:
    """Repository for page comments"""

    @staticmethod
    async def create(page_id: int, user_id: int, content: str,
                     parent_id: Optional[int] = None) -> Comment:
        db = get_db()
        async with db.transaction():
            cursor = await db.execute(
                "INSERT INTO comments (page_id, user_id, content, parent_id) VALUES (?, ?, ?, ?)",
                (page_id, user_id, content, parent_id)
            )
        return await CommentRepository.get_by_id(cursor.lastrowid)

    @staticmethod
    async def get_by_id(comment_id: int) -> Optional[Comment]:
        db = get_db()
        row = await db.fetch_one(COMMENT_SELECT + " WHERE c.id = ?", (comment_id,))
        return Comment.from_dict(row) if row else None

    @staticmethod
    async def list_for_page(page_id: int) -> List[Comment]:
        """Flat list, oldest first"""
        db = get_db()
        rows = await db.fetch_all(
            COMMENT_SELECT + " WHERE c.page_id = ? ORDER BY c.created_at ASC, c.id ASC",
            (page_id,)
        )
        return [Comment.from_dict(row) for row in rows]

    @staticmethod
    async def update(comment_id: int, content: str) -> Optional[Comment]:
        db = get_db()
        async with db.transaction():
            await db.execute(
                "UPDATE comments SET content = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (content, comment_id)
            )
        return await CommentRepository.get_by_id(comment_id)

    @staticmethod
    async def delete(comment_id: int) -> bool:
        """Delete a comment; replies cascade"""
        db = get_db()
        async with db.transaction():
            cursor = await db.execute("DELETE FROM comments WHERE id = ?", (comment_id,))
        return cursor.rowcount > 0

    @staticmethod
    async def count_for_page(page_id: int) -> int:
        db = get_db()
        result = await db.fetch_one(
            "SELECT COUNT(*) as count FROM comments WHERE page_id = ?", (page_id,)
        )
        return result["count"] if result else 0
