"""PostgreSQL store adapter for Inkwell.

Production backend built on an asyncpg connection pool. The upsert and the
like counter each run as a single statement.
"""

import asyncio
import logging
from typing import List, Optional

import asyncpg
from pydantic import BaseModel

from .errors import StoreConnectionFailure
from .models import Post, PostFields

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS posts (
    id BIGSERIAL PRIMARY KEY,
    slug TEXT NOT NULL UNIQUE,
    title TEXT NOT NULL,
    date TIMESTAMPTZ NOT NULL,
    content TEXT NOT NULL,
    tags TEXT[] NOT NULL DEFAULT '{}',
    likes INTEGER NOT NULL DEFAULT 0 CHECK (likes >= 0),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_posts_date ON posts (date DESC);
"""

POST_COLUMNS = "slug, title, date, content, tags, likes, created_at, updated_at"


class PostgresConfig(BaseModel):
    """PostgreSQL connection configuration."""
    dsn: str = "postgresql://inkwell@localhost:5432/inkwell"
    min_connections: int = 1
    max_connections: int = 10
    command_timeout: int = 60


def _record_to_post(record: asyncpg.Record) -> Post:
    data = dict(record)
    data['tags'] = list(data['tags'] or [])
    return Post(**data)


class PostgresAdapter:
    """PostgreSQL database adapter with the Inkwell store interface."""

    def __init__(self, config: PostgresConfig):
        self.config = config
        self.pool: Optional[asyncpg.Pool] = None

    async def initialize(self):
        """Initialize connection pool and ensure schema exists."""
        try:
            self.pool = await asyncpg.create_pool(
                dsn=self.config.dsn,
                min_size=self.config.min_connections,
                max_size=self.config.max_connections,
                command_timeout=self.config.command_timeout
            )
            async with self.pool.acquire() as conn:
                await conn.execute(SCHEMA_SQL)
        except (OSError, ValueError, asyncio.TimeoutError,
                asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error(f"Failed to initialize PostgreSQL: {e}")
            if self.pool:
                await self.pool.close()
                self.pool = None
            raise StoreConnectionFailure("postgresql", str(e)) from e

        logger.info("PostgreSQL connection pool initialized")

    async def close(self):
        """Close connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("PostgreSQL connection pool closed")

    async def find_one_by_slug(self, slug: str) -> Optional[Post]:
        """Get a post by its slug, or None."""
        async with self.pool.acquire() as conn:
            record = await conn.fetchrow(
                f"SELECT {POST_COLUMNS} FROM posts WHERE slug = $1", slug
            )
        return _record_to_post(record) if record else None

    async def find_all(self) -> List[Post]:
        """Get every post, newest first."""
        async with self.pool.acquire() as conn:
            records = await conn.fetch(
                f"SELECT {POST_COLUMNS} FROM posts ORDER BY date DESC, id DESC"
            )
        return [_record_to_post(r) for r in records]

    async def upsert_by_slug(self, slug: str, fields: PostFields) -> Post:
        """Insert a post or overwrite the synced fields of an existing one."""
        async with self.pool.acquire() as conn:
            record = await conn.fetchrow(
                f"""
                INSERT INTO posts (slug, title, date, content, tags)
                VALUES ($1, $2, $3, $4, $5)
                ON CONFLICT (slug) DO UPDATE SET
                    title = EXCLUDED.title,
                    date = EXCLUDED.date,
                    content = EXCLUDED.content,
                    tags = EXCLUDED.tags,
                    updated_at = NOW()
                RETURNING {POST_COLUMNS}
                """,
                slug, fields.title, fields.date, fields.content, fields.tags
            )
        return _record_to_post(record)

    async def increment_likes(self, slug: str) -> Optional[Post]:
        """Add one like to a post. Returns None when the slug is unknown."""
        async with self.pool.acquire() as conn:
            record = await conn.fetchrow(
                f"""
                UPDATE posts SET likes = likes + 1, updated_at = NOW()
                WHERE slug = $1
                RETURNING {POST_COLUMNS}
                """,
                slug
            )
        return _record_to_post(record) if record else None

    async def count_posts(self) -> int:
        """Number of stored posts."""
        async with self.pool.acquire() as conn:
            return await conn.fetchval("SELECT COUNT(*) FROM posts")
