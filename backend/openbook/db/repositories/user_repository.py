from typing import List, Optional, Dict, Any, Iterable

from openbook.core.security import hash_password
from openbook.db.database import get_db
from openbook.models.user import User


USER_UPDATABLE_FIELDS = ("username", "email", "avatar", "bio", "is_admin")


class UserRepository:
    """Repository for user accounts and their tags"""

    @staticmethod
    async def _attach_tags(rows: List[Dict[str, Any]]) -> List[User]:
        if not rows:
            return []
        db = get_db()
        ids = [row["id"] for row in rows]
        placeholders = ", ".join(["?" for _ in ids])
        tag_rows = await db.fetch_all(
            f"""SELECT ut.user_id, t.name FROM user_tags ut
                JOIN tags t ON t.id = ut.tag_id
                WHERE ut.user_id IN ({placeholders})
                ORDER BY t.name""",
            tuple(ids)
        )
        tags_by_user: Dict[int, List[str]] = {}
        for tag_row in tag_rows:
            tags_by_user.setdefault(tag_row["user_id"], []).append(tag_row["name"])
        return [User.from_dict(row, tags=tags_by_user.get(row["id"], [])) for row in rows]

    @staticmethod
    async def _replace_tags(db, user_id: int, tag_names: Iterable[str]):
        await db.execute("DELETE FROM user_tags WHERE user_id = ?", (user_id,))
        await db.execute_many(
            "INSERT OR IGNORE INTO user_tags (user_id, tag_id) SELECT ?, id FROM tags WHERE name = ?",
            [(user_id, name) for name in tag_names]
        )

    @staticmethod
    async def create(
        username: str,
        email: str,
        password: str,
        is_admin: bool = False,
        avatar: Optional[str] = None,
        bio: str = "",
        tags: Optional[List[str]] = None
    ) -> User:
        """Create a user, hashing the password, and attach tags by name"""
        db = get_db()
        password_hash = hash_password(password)
        async with db.transaction():
            if avatar is None:
                cursor = await db.execute(
                    """INSERT INTO users (username, email, password_hash, is_admin, bio)
                       VALUES (?, ?, ?, ?, ?)""",
                    (username, email, password_hash, is_admin, bio)
                )
            else:
                cursor = await db.execute(
                    """INSERT INTO users (username, email, password_hash, is_admin, avatar, bio)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (username, email, password_hash, is_admin, avatar, bio)
                )
            user_id = cursor.lastrowid
            if tags:
                await UserRepository._replace_tags(db, user_id, tags)

        return await UserRepository.get_by_id(user_id)

    @staticmethod
    async def get_by_id(user_id: int) -> Optional[User]:
        """Get user by ID"""
        db = get_db()
        row = await db.fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))
        if not row:
            return None
        return (await UserRepository._attach_tags([row]))[0]

    @staticmethod
    async def get_by_username(username: str) -> Optional[User]:
        """Get user by username"""
        db = get_db()
        row = await db.fetch_one("SELECT * FROM users WHERE username = ?", (username,))
        if not row:
            return None
        return (await UserRepository._attach_tags([row]))[0]

    @staticmethod
    async def get_by_email(email: str) -> Optional[User]:
        """Get user by email"""
        db = get_db()
        row = await db.fetch_one("SELECT * FROM users WHERE email = ?", (email,))
        if not row:
            return None
        return (await UserRepository._attach_tags([row]))[0]

    @staticmethod
    async def list_all() -> List[User]:
        """Get all users, newest first"""
        db = get_db()
        rows = await db.fetch_all("SELECT * FROM users ORDER BY created_at DESC, id DESC")
        return await UserRepository._attach_tags(rows)

    @staticmethod
    async def update(
        user_id: int,
        fields: Dict[str, Any],
        password: Optional[str] = None,
        tags: Optional[List[str]] = None
    ) -> Optional[User]:
        """Update account fields, password and tags in one transaction"""
        data = {k: v for k, v in fields.items() if k in USER_UPDATABLE_FIELDS and v is not None}
        if password:
            data["password_hash"] = hash_password(password)

        db = get_db()
        async with db.transaction():
            if data:
                set_clause = ", ".join([f"{k} = ?" for k in data.keys()])
                values = list(data.values())
                values.append(user_id)
                await db.execute(f"UPDATE users SET {set_clause} WHERE id = ?", tuple(values))
            if tags is not None:
                await UserRepository._replace_tags(db, user_id, tags)

        return await UserRepository.get_by_id(user_id)

    @staticmethod
    async def update_profile(
        user_id: int,
        username: Optional[str] = None,
        email: Optional[str] = None,
        avatar: Optional[str] = None,
        bio: Optional[str] = None
    ) -> Optional[User]:
        """Update the self-service profile fields"""
        return await UserRepository.update(
            user_id, {"username": username, "email": email, "avatar": avatar, "bio": bio}
        )

    @staticmethod
    async def update_password(user_id: int, password: str) -> Optional[User]:
        return await UserRepository.update(user_id, {}, password=password)

    @staticmethod
    async def set_admin(user_id: int, is_admin: bool) -> Optional[User]:
        return await UserRepository.update(user_id, {"is_admin": is_admin})

    @staticmethod
    async def set_tags(user_id: int, tag_names: List[str]) -> Optional[User]:
        """Replace the user's tags"""
        return await UserRepository.update(user_id, {}, tags=tag_names)

    @staticmethod
    async def get_tag_names(user_id: int) -> List[str]:
        db = get_db()
        rows = await db.fetch_all(
            """SELECT t.name FROM user_tags ut
               JOIN tags t ON t.id = ut.tag_id
               WHERE ut.user_id = ? ORDER BY t.name""",
            (user_id,)
        )
        return [row["name"] for row in rows]

    @staticmethod
    async def update_last_login(user_id: int):
        db = get_db()
        async with db.transaction():
            await db.execute(
                "UPDATE users SET last_login = CURRENT_TIMESTAMP WHERE id = ?", (user_id,)
            )

    @staticmethod
    async def delete(user_id: int) -> bool:
        """Delete a user; authored pages and history keep existing without an author"""
        db = get_db()
        async with db.transaction():
            cursor = await db.execute("DELETE FROM users WHERE id = ?", (user_id,))
        return cursor.rowcount > 0
