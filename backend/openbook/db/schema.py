"""Database schema definitions"""

# Users table
USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT UNIQUE NOT NULL,
    email TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    is_admin BOOLEAN DEFAULT FALSE,
    avatar TEXT DEFAULT '/avatars/avatar-openbookwiki.svg',
    bio TEXT DEFAULT '',
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    last_login DATETIME
)
"""

# Tags table: named, coloured labels that group permissions
TAGS_TABLE = """
CREATE TABLE IF NOT EXISTS tags (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    color TEXT NOT NULL DEFAULT '#3B82F6',
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""

# Tags attached to a user
USER_TAGS_TABLE = """
CREATE TABLE IF NOT EXISTS user_tags (
    user_id INTEGER NOT NULL,
    tag_id INTEGER NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (user_id, tag_id),
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
    FOREIGN KEY (tag_id) REFERENCES tags (id) ON DELETE CASCADE
)
"""

# Permissions table
PERMISSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS permissions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    description TEXT,
    category TEXT DEFAULT 'general',
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""

# Tag <-> permission grants
TAG_PERMISSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS tag_permissions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tag_id INTEGER NOT NULL,
    permission_id INTEGER NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (tag_id) REFERENCES tags (id) ON DELETE CASCADE,
    FOREIGN KEY (permission_id) REFERENCES permissions (id) ON DELETE CASCADE,
    UNIQUE(tag_id, permission_id)
)
"""

# Wiki pages table
WIKI_PAGES_TABLE = """
CREATE TABLE IF NOT EXISTS wiki_pages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT UNIQUE NOT NULL,
    content TEXT NOT NULL,
    author_id INTEGER,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    is_protected BOOLEAN DEFAULT FALSE,
    comments_enabled BOOLEAN DEFAULT FALSE,
    icon TEXT,
    FOREIGN KEY (author_id) REFERENCES users (id) ON DELETE SET NULL
)
"""

# Page history: one row per content update, holding the replaced version
WIKI_PAGE_HISTORY_TABLE = """
CREATE TABLE IF NOT EXISTS wiki_page_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    page_id INTEGER NOT NULL,
    content TEXT NOT NULL,
    title TEXT NOT NULL,
    changed_by INTEGER,
    change_reason TEXT,
    changed_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (page_id) REFERENCES wiki_pages (id) ON DELETE CASCADE,
    FOREIGN KEY (changed_by) REFERENCES users (id) ON DELETE SET NULL
)
"""

# Comments table, parent_id for threaded replies
COMMENTS_TABLE = """
CREATE TABLE IF NOT EXISTS comments (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    page_id INTEGER NOT NULL,
    user_id INTEGER NOT NULL,
    content TEXT NOT NULL,
    parent_id INTEGER,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (page_id) REFERENCES wiki_pages (id) ON DELETE CASCADE,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE,
    FOREIGN KEY (parent_id) REFERENCES comments (id) ON DELETE CASCADE
)
"""

# Activity log
ACTIVITIES_TABLE = """
CREATE TABLE IF NOT EXISTS activities (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    type TEXT NOT NULL,
    title TEXT NOT NULL,
    description TEXT,
    icon TEXT,
    metadata TEXT,  -- JSON object
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
)
"""

# Schema version table for migrations
SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at DATETIME NOT NULL,
    description TEXT
)
"""

# Indexes for better performance
INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_activities_user_id ON activities (user_id)",
    "CREATE INDEX IF NOT EXISTS idx_activities_created_at ON activities (created_at)",
    "CREATE INDEX IF NOT EXISTS idx_wiki_pages_title ON wiki_pages (title)",
    "CREATE INDEX IF NOT EXISTS idx_wiki_page_history_page_id ON wiki_page_history (page_id)",
    "CREATE INDEX IF NOT EXISTS idx_comments_page_id ON comments (page_id)",
    "CREATE INDEX IF NOT EXISTS idx_comments_parent_id ON comments (parent_id)",
    "CREATE INDEX IF NOT EXISTS idx_tags_name ON tags (name)",
    "CREATE INDEX IF NOT EXISTS idx_user_tags_tag_id ON user_tags (tag_id)",
    "CREATE INDEX IF NOT EXISTS idx_permissions_name ON permissions (name)",
    "CREATE INDEX IF NOT EXISTS idx_tag_permissions_tag_id ON tag_permissions (tag_id)",
    "CREATE INDEX IF NOT EXISTS idx_tag_permissions_permission_id ON tag_permissions (permission_id)"
]

# All tables in order of creation
ALL_TABLES = [
    SCHEMA_VERSION_TABLE,
    USERS_TABLE,
    TAGS_TABLE,
    USER_TAGS_TABLE,
    PERMISSIONS_TABLE,
    TAG_PERMISSIONS_TABLE,
    WIKI_PAGES_TABLE,
    WIKI_PAGE_HISTORY_TABLE,
    COMMENTS_TABLE,
    ACTIVITIES_TABLE
]
