from typing import List, Optional, Dict, Any, Union

from openbook.db.database import get_db
from openbook.models.wiki_page import WikiPage, WikiPageHistory


PAGE_SELECT = """
SELECT w.*, u.username as author_username
FROM wiki_pages w
LEFT JOIN users u ON w.author_id = u.id
"""


class WikiPageRepository:
    """Repository for wiki pages and their version history"""

    @staticmethod
    async def create(
        title: str,
        content: str,
        author_id: Optional[int],
        is_protected: bool = False,
        icon: Optional[str] = None
    ) -> WikiPage:
        db = get_db()
        async with db.transaction():
            cursor = await db.execute(
                """INSERT INTO wiki_pages (title, content, author_id, is_protected, icon)
                   VALUES (?, ?, ?, ?, ?)""",
                (title, content, author_id, is_protected, icon)
            )
        return await WikiPageRepository.get_by_id(cursor.lastrowid)

    @staticmethod
    async def get_by_id(page_id: int) -> Optional[WikiPage]:
        db = get_db()
        row = await db.fetch_one(PAGE_SELECT + " WHERE w.id = ?", (page_id,))
        return WikiPage.from_dict(row) if row else None

    @staticmethod
    async def get_by_title(title: str) -> Optional[WikiPage]:
        db = get_db()
        row = await db.fetch_one(PAGE_SELECT + " WHERE w.title = ?", (title,))
        return WikiPage.from_dict(row) if row else None

    @staticmethod
    async def resolve(ref: Union[int, str]) -> Optional[WikiPage]:
        """Find a page by numeric id first, then by title"""
        ref = str(ref)
        if ref.isdigit():
            page = await WikiPageRepository.get_by_id(int(ref))
            if page:
                return page
        return await WikiPageRepository.get_by_title(ref)

    @staticmethod
    async def list_all() -> List[WikiPage]:
        """All pages with author username, most recently updated first"""
        db = get_db()
        rows = await db.fetch_all(PAGE_SELECT + " ORDER BY w.updated_at DESC, w.id DESC")
        return [WikiPage.from_dict(row) for row in rows]

    @staticmethod
    async def update_content(
        page_id: int,
        new_fields: Dict[str, Any],
        editor_user_id: Optional[int],
        change_reason: Optional[str] = None
    ) -> Optional[WikiPage]:
        """
        Archive the current (title, content) then apply the update.

        new_fields may hold "content" and/or "icon". The archive insert and the
        update share one transaction, so a failed archive leaves the page as it was.
        """
        db = get_db()
        async with db.transaction():
            current = await db.fetch_one(
                "SELECT title, content FROM wiki_pages WHERE id = ?", (page_id,)
            )
            if not current:
                return None

            await db.execute(
                """INSERT INTO wiki_page_history (page_id, content, title, changed_by, change_reason)
                   VALUES (?, ?, ?, ?, ?)""",
                (page_id, current["content"], current["title"], editor_user_id, change_reason)
            )

            query = "UPDATE wiki_pages SET updated_at = CURRENT_TIMESTAMP"
            params = []
            if new_fields.get("content") is not None:
                query += ", content = ?"
                params.append(new_fields["content"])
            if "icon" in new_fields:
                query += ", icon = ?"
                params.append(new_fields["icon"])
            query += " WHERE id = ?"
            params.append(page_id)
            await db.execute(query, tuple(params))

        return await WikiPageRepository.get_by_id(page_id)

    @staticmethod
    async def rename(page_id: int, new_title: str) -> Optional[WikiPage]:
        db = get_db()
        async with db.transaction():
            await db.execute(
                "UPDATE wiki_pages SET title = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (new_title, page_id)
            )
        return await WikiPageRepository.get_by_id(page_id)

    @staticmethod
    async def set_protection(page_id: int, is_protected: bool) -> Optional[WikiPage]:
        db = get_db()
        async with db.transaction():
            await db.execute(
                "UPDATE wiki_pages SET is_protected = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (is_protected, page_id)
            )
        return await WikiPageRepository.get_by_id(page_id)

    @staticmethod
    async def set_comments_enabled(page_id: int, enabled: bool) -> Optional[WikiPage]:
        db = get_db()
        async with db.transaction():
            await db.execute(
                "UPDATE wiki_pages SET comments_enabled = ? WHERE id = ?",
                (enabled, page_id)
            )
        return await WikiPageRepository.get_by_id(page_id)

    @staticmethod
    async def delete(page_id: int) -> bool:
        """Delete a page; history and comments cascade"""
        db = get_db()
        async with db.transaction():
            cursor = await db.execute("DELETE FROM wiki_pages WHERE id = ?", (page_id,))
        return cursor.rowcount > 0

    @staticmethod
    async def get_history_for_page(page_id: int) -> List[WikiPageHistory]:
        """Lightweight history entries, newest first"""
        db = get_db()
        rows = await db.fetch_all(
            """SELECT h.id, h.page_id, h.changed_at, h.title, h.changed_by, h.change_reason,
                      u.username as changed_by_username
               FROM wiki_page_history h
               LEFT JOIN users u ON h.changed_by = u.id
               WHERE h.page_id = ?
               ORDER BY h.changed_at DESC, h.id DESC""",
            (page_id,)
        )
        return [WikiPageHistory.from_dict(row) for row in rows]

    @staticmethod
    async def get_history_detail(history_id: int) -> Optional[WikiPageHistory]:
        """Full archived content of one history entry"""
        db = get_db()
        row = await db.fetch_one(
            """SELECT h.*, u.username as changed_by_username
               FROM wiki_page_history h
               LEFT JOIN users u ON h.changed_by = u.id
               WHERE h.id = ?""",
            (history_id,)
        )
        return WikiPageHistory.from_dict(row) if row else None

    @staticmethod
    async def count_history(page_id: int) -> int:
        db = get_db()
        result = await db.fetch_one(
            "SELECT COUNT(*) as count FROM wiki_page_history WHERE page_id = ?", (page_id,)
        )
        return result["count"] if result else 0
