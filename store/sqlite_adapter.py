"""SQLite store adapter for Inkwell.

Development and test backend. Posts live in a single ``posts`` table keyed
by slug; tags are kept as a JSON array and timestamps as UTC ISO strings so
that ordering by the ``date`` column is chronological.
"""

import sqlite3
import logging
import json
from typing import List, Optional
from datetime import datetime, timezone

from .errors import StoreConnectionFailure
from .models import Post, PostFields

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS posts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    slug TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    date TEXT NOT NULL,
    content TEXT NOT NULL,
    tags TEXT NOT NULL DEFAULT '[]',
    likes INTEGER NOT NULL DEFAULT 0 CHECK (likes >= 0),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_posts_date ON posts (date);
"""


def _to_db_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _row_to_post(row: sqlite3.Row) -> Post:
    return Post(
        slug=row['slug'],
        title=row['title'],
        date=datetime.fromisoformat(row['date']),
        content=row['content'],
        tags=json.loads(row['tags']),
        likes=row['likes'],
        created_at=datetime.fromisoformat(row['created_at']),
        updated_at=datetime.fromisoformat(row['updated_at']),
    )


class SQLiteAdapter:
    """SQLite database adapter with the Inkwell store interface."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None

    async def initialize(self):
        """Open the SQLite connection and ensure the schema exists."""
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            self.conn.executescript(SCHEMA_SQL)
            self.conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to initialize SQLite: {e}")
            if self.conn:
                self.conn.close()
                self.conn = None
            raise StoreConnectionFailure(self.db_path, str(e)) from e

        logger.info(f"SQLite adapter initialized: {self.db_path}")

    async def close(self):
        """Close SQLite connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("SQLite connection closed")

    async def find_one_by_slug(self, slug: str) -> Optional[Post]:
        """Get a post by its slug, or None."""
        cursor = self.conn.execute("SELECT * FROM posts WHERE slug = ?", (slug,))
        row = cursor.fetchone()
        return _row_to_post(row) if row else None

    async def find_all(self) -> List[Post]:
        """Get every post, newest first."""
        cursor = self.conn.execute("SELECT * FROM posts ORDER BY date DESC, id DESC")
        return [_row_to_post(row) for row in cursor.fetchall()]

    async def upsert_by_slug(self, slug: str, fields: PostFields) -> Post:
        """Insert a post or overwrite the synced fields of an existing one.

        ``likes`` and ``created_at`` are only written on insert.
        """
        now = _to_db_time(datetime.now(timezone.utc))
        self.conn.execute(
            """
            INSERT INTO posts (slug, title, date, content, tags, likes, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, 0, ?, ?)
            ON CONFLICT (slug) DO UPDATE SET
                title = excluded.title,
                date = excluded.date,
                content = excluded.content,
                tags = excluded.tags,
                updated_at = excluded.updated_at
            """,
            (slug, fields.title, _to_db_time(fields.date), fields.content,
             json.dumps(fields.tags), now, now)
        )
        self.conn.commit()
        return await self.find_one_by_slug(slug)

    async def increment_likes(self, slug: str) -> Optional[Post]:
        """Add one like to a post. Returns None when the slug is unknown."""
        now = _to_db_time(datetime.now(timezone.utc))
        cursor = self.conn.execute(
            "UPDATE posts SET likes = likes + 1, updated_at = ? WHERE slug = ?",
            (now, slug)
        )
        self.conn.commit()
        if cursor.rowcount == 0:
            return None
        return await self.find_one_by_slug(slug)

    async def count_posts(self) -> int:
        """Number of stored posts."""
        cursor = self.conn.execute("SELECT COUNT(*) FROM posts")
        return cursor.fetchone()[0]
