"""SQLite database connection and schema management.

Provides get_db_connection() context manager and init_db() for schema creation.
Stores one badged_repos row per badged repository.
"""

import sqlite3
from ..config import get_settings
from contextlib import contextmanager

settings = get_settings()

@contextmanager
def get_db_connection():
    conn = sqlite3.connect(settings.DB_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    schema = """
    CREATE TABLE IF NOT EXISTS badged_repos (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        github_repo_id INTEGER UNIQUE,
        gitlab_repo_id INTEGER UNIQUE,
        user_id TEXT,
        url TEXT NOT NULL,
        dei_commit_sha TEXT NOT NULL,
        badge_tier TEXT DEFAULT 'Bronze',
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        CHECK (github_repo_id IS NOT NULL OR gitlab_repo_id IS NOT NULL)
    );
    """
    with get_db_connection() as conn:
        conn.executescript(schema)
        conn.commit()
