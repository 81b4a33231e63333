"""Default tags, permissions, accounts and pages for a fresh wiki"""
import json
import logging
from typing import Dict, List, Tuple

from openbook.core.config import settings
from openbook.core.security import hash_password
from openbook.db.database import get_db
from openbook.models.tag import ADMINISTRATOR_TAG, CONTRIBUTOR_TAG, VISITOR_TAG, GUEST_TAG

logger = logging.getLogger(__name__)

DEFAULT_TAGS: List[Tuple[str, str]] = [
    (ADMINISTRATOR_TAG, "#DC2626"),
    (CONTRIBUTOR_TAG, "#2563EB"),
    (VISITOR_TAG, "#6B7280"),
    (GUEST_TAG, "#94A3B8"),
]

# (name, description, category)
DEFAULT_PERMISSIONS: List[Tuple[str, str, str]] = [
    ("admin_panel_access", "Access the administration panel", "admin"),
    ("user_management", "Create, edit and delete users", "admin"),
    ("tag_management", "Create, edit and delete tags", "admin"),
    ("permission_management", "Manage permissions and assign them to tags", "admin"),
    ("database_management", "Inspect and maintain the database", "admin"),
    ("view_activity_admin", "View the activity of every user", "admin"),
    ("create_pages", "Create new wiki pages", "pages"),
    ("edit_pages", "Edit wiki page content", "pages"),
    ("delete_pages", "Delete wiki pages", "pages"),
    ("protect_pages", "Protect pages and edit protected pages", "pages"),
    ("reorder_pages", "Change the order of pages", "pages"),
    ("create_sections", "Add sections to a page", "sections"),
    ("delete_sections", "Remove sections from a page", "sections"),
    ("edit_sections", "Edit and rename sections", "sections"),
    ("reorder_sections", "Change the order of sections", "sections"),
    ("edit_own_profile", "Edit own profile", "user"),
    ("change_avatar", "Change own avatar", "user"),
    ("view_activity", "View the activity feed", "user"),
]

DEFAULT_GRANTS: Dict[str, List[str]] = {
    ADMINISTRATOR_TAG: [name for name, _, _ in DEFAULT_PERMISSIONS],
    CONTRIBUTOR_TAG: [
        "create_pages", "edit_pages", "create_sections", "edit_sections",
        "reorder_sections", "edit_own_profile", "change_avatar", "view_activity",
    ],
    VISITOR_TAG: ["edit_own_profile", "change_avatar", "view_activity"],
    GUEST_TAG: ["view_activity"],
}

DEMO_USERS = [
    {
        "username": "contributor",
        "email": "contributor@openbookwiki.com",
        "password": "contrib123",
        "avatar": "/avatars/avatar-blue.svg",
        "bio": "Contributor user who can create and modify articles.",
        "tag": CONTRIBUTOR_TAG,
    },
    {
        "username": "visitor",
        "email": "visitor@openbookwiki.com",
        "password": "visit123",
        "avatar": "/avatars/avatar-green.svg",
        "bio": "Visitor user with read-only access.",
        "tag": VISITOR_TAG,
    },
]

HOME_PAGE = """# Welcome to Open Book Wiki!

Your personal wiki is now up and running!

## What is Open Book Wiki?

Open Book Wiki is a simple and modern collaborative documentation platform. It allows you to easily create, organize, and share your knowledge.

## How to get started?

### 1. Authentication
- Click on "Login" in the top right corner
- Use the credentials: **admin** / **admin123**
- Once logged in, you will have access to editing features

### 2. Create content
- Click on "Edit" at the top right of this page to edit it
- Use the "+" button in the sidebar to create new pages

## Main Features

- **Markdown Editing**: Simple and powerful syntax
- **Multi-user**: Team collaboration
- **Protected Pages**: Control access to sensitive content
- **Activity Tracking**: Modification history

---

*Happy wiki-ing!*"""

GETTING_STARTED_PAGE = """# Quick Start Guide

This guide will help you get started with Open Book Wiki quickly.

## Step 1: Login

1. Click on the "Login" button in the top right
2. Enter your credentials:
   - **Username**: admin
   - **Password**: admin123
3. Click on "Login"

## Step 2: Content Creation

### Create a new page
1. Click the "+" button in the sidebar
2. Give your page a title
3. Write content in Markdown
4. Click "Save"

### Edit an existing page
1. Navigate to the page you want to edit
2. Click "Edit" at the top right
3. Save your changes

## Step 3: Organization

### Protected Pages
Some pages can be protected from editing by unauthorized users.

### Useful Markdown Syntax
- `# Title` for main headings
- `## Subtitle` for sub-sections
- `**bold**` for highlighting
- `` `code` `` for inline code"""

DEFAULT_PAGES = [
    ("Home", HOME_PAGE, "home"),
    ("Getting Started", GETTING_STARTED_PAGE, "book-open"),
]


async def _create_user(db, username: str, email: str, password: str, is_admin: bool,
                       avatar: str, bio: str, tag_name: str) -> int:
    cursor = await db.execute(
        """INSERT INTO users (username, email, password_hash, is_admin, avatar, bio)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (username, email, hash_password(password), is_admin, avatar, bio)
    )
    user_id = cursor.lastrowid
    await db.execute(
        "INSERT OR IGNORE INTO user_tags (user_id, tag_id) SELECT ?, id FROM tags WHERE name = ?",
        (user_id, tag_name)
    )
    return user_id


async def seed_tags_and_permissions(db):
    """Insert system tags, the permission catalogue and default grants"""
    await db.execute_many(
        "INSERT OR IGNORE INTO tags (name, color) VALUES (?, ?)",
        DEFAULT_TAGS
    )
    await db.execute_many(
        "INSERT OR IGNORE INTO permissions (name, description, category) VALUES (?, ?, ?)",
        DEFAULT_PERMISSIONS
    )

    # Grants are only seeded for tags that have none, so admin edits survive restarts
    for tag_name, permission_names in DEFAULT_GRANTS.items():
        existing = await db.fetch_one(
            """SELECT COUNT(*) as count FROM tag_permissions tp
               JOIN tags t ON t.id = tp.tag_id WHERE t.name = ?""",
            (tag_name,)
        )
        if existing["count"]:
            continue
        await db.execute_many(
            """INSERT OR IGNORE INTO tag_permissions (tag_id, permission_id)
               SELECT t.id, p.id FROM tags t, permissions p WHERE t.name = ? AND p.name = ?""",
            [(tag_name, permission_name) for permission_name in permission_names]
        )


async def seed_users(db):
    """Create the admin account and, optionally, the demo accounts"""
    admin = await db.fetch_one("SELECT id FROM users WHERE username = ?", ("admin",))
    if not admin:
        admin_id = await _create_user(
            db, "admin", "admin@openbookwiki.com", settings.DEFAULT_ADMIN_PASSWORD, True,
            settings.DEFAULT_AVATAR, "Main administrator of Open Book Wiki.", ADMINISTRATOR_TAG
        )
        await db.execute(
            """INSERT INTO activities (user_id, type, title, description, icon, metadata)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (admin_id, "system", "Welcome to Open Book Wiki!",
             "Your admin account has been created successfully.", "shield", json.dumps({}))
        )
        logger.info("Default admin user created")

    if not settings.SEED_DEMO_USERS:
        return

    for demo in DEMO_USERS:
        existing = await db.fetch_one("SELECT id FROM users WHERE username = ?", (demo["username"],))
        if existing:
            continue
        await _create_user(
            db, demo["username"], demo["email"], demo["password"], False,
            demo["avatar"], demo["bio"], demo["tag"]
        )
        logger.info(f"Demo user '{demo['username']}' created")


async def seed_pages(db):
    """Create the welcome pages when the wiki is empty"""
    result = await db.fetch_one("SELECT COUNT(*) as count FROM wiki_pages")
    if result["count"]:
        return

    admin = await db.fetch_one("SELECT id FROM users WHERE username = ?", ("admin",))
    author_id = admin["id"] if admin else None
    await db.execute_many(
        """INSERT INTO wiki_pages (title, content, author_id, is_protected, icon)
           VALUES (?, ?, ?, FALSE, ?)""",
        [(title, content, author_id, icon) for title, content, icon in DEFAULT_PAGES]
    )
    logger.info("Default wiki pages created")


async def seed_default_data():
    """Seed everything a fresh wiki needs; safe to run on every startup"""
    db = get_db()
    async with db.transaction():
        await seed_tags_and_permissions(db)
        await seed_users(db)
        await seed_pages(db)
