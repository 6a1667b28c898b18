from datetime import datetime, timezone

import pytest

from config import DatabaseConfig, DatabaseType, open_store
from store import PostFields, SQLiteAdapter, StoreConnectionFailure


def fields(title="Post", day=1, content="body", tags=None):
    return PostFields(
        title=title,
        date=datetime(2024, 1, day, tzinfo=timezone.utc),
        content=content,
        tags=tags or []
    )


class TestSQLiteAdapter:
    """Store behaviour on a real SQLite database."""

    @pytest.mark.asyncio
    async def test_insert_applies_defaults(self, sqlite_store):
        post = await sqlite_store.upsert_by_slug("first", fields(tags=["a"]))
        assert post.slug == "first"
        assert post.likes == 0
        assert post.tags == ["a"]
        assert post.created_at is not None
        assert post.updated_at is not None

    @pytest.mark.asyncio
    async def test_upsert_updates_in_place(self, sqlite_store):
        await sqlite_store.upsert_by_slug("x", fields(title="Old"))
        updated = await sqlite_store.upsert_by_slug("x", fields(title="New", content="new body", tags=["t"]))
        assert updated.title == "New"
        assert updated.content == "new body"
        assert updated.tags == ["t"]
        assert await sqlite_store.count_posts() == 1

    @pytest.mark.asyncio
    async def test_upsert_keeps_likes_and_created_at(self, sqlite_store):
        created = await sqlite_store.upsert_by_slug("x", fields())
        for _ in range(5):
            await sqlite_store.increment_likes("x")
        updated = await sqlite_store.upsert_by_slug("x", fields(title="Changed"))
        assert updated.likes == 5
        assert updated.created_at == created.created_at

    @pytest.mark.asyncio
    async def test_find_all_newest_first(self, sqlite_store):
        await sqlite_store.upsert_by_slug("old", fields(day=1))
        await sqlite_store.upsert_by_slug("new", fields(day=20))
        await sqlite_store.upsert_by_slug("mid", fields(day=10))
        posts = await sqlite_store.find_all()
        assert [p.slug for p in posts] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_find_one_missing(self, sqlite_store):
        assert await sqlite_store.find_one_by_slug("nope") is None

    @pytest.mark.asyncio
    async def test_increment_likes(self, sqlite_store):
        await sqlite_store.upsert_by_slug("x", fields())
        post = await sqlite_store.increment_likes("x")
        assert post.likes == 1
        post = await sqlite_store.increment_likes("x")
        assert post.likes == 2

    @pytest.mark.asyncio
    async def test_increment_likes_unknown_slug(self, sqlite_store):
        assert await sqlite_store.increment_likes("ghost") is None
        assert await sqlite_store.count_posts() == 0

    @pytest.mark.asyncio
    async def test_dates_round_trip_as_utc(self, sqlite_store):
        post = await sqlite_store.upsert_by_slug("x", fields(day=15))
        assert post.date == datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert post.date.tzinfo is not None

    @pytest.mark.asyncio
    async def test_unopenable_path_raises_connection_failure(self, tmp_path):
        adapter = SQLiteAdapter(str(tmp_path / "missing" / "dir" / "x.db"))
        with pytest.raises(StoreConnectionFailure):
            await adapter.initialize()
        assert adapter.conn is None


class TestDatabaseConfig:
    """Backend selection from DATABASE_URL."""

    def test_sqlite_relative_path(self):
        config = DatabaseConfig.from_url("sqlite:///data/inkwell.db")
        assert config.type == DatabaseType.SQLITE
        assert config.sqlite_path == "data/inkwell.db"

    def test_sqlite_absolute_path(self):
        config = DatabaseConfig.from_url("sqlite:////var/lib/inkwell.db")
        assert config.sqlite_path == "/var/lib/inkwell.db"

    def test_sqlite_memory(self):
        assert DatabaseConfig.from_url("sqlite://:memory:").sqlite_path == ":memory:"

    @pytest.mark.parametrize("url", [
        "postgresql://user:pw@db:5432/blog",
        "postgres://user@db/blog",
    ])
    def test_postgres(self, url):
        config = DatabaseConfig.from_url(url)
        assert config.type == DatabaseType.POSTGRESQL
        assert config.postgres.dsn == url

    @pytest.mark.parametrize("url", ["mongodb://localhost/blog", "sqlite://", "not a url"])
    def test_unsupported(self, url):
        with pytest.raises(ValueError):
            DatabaseConfig.from_url(url)

    @pytest.mark.asyncio
    async def test_open_store_closes_on_error(self, db_path):
        config = DatabaseConfig(type=DatabaseType.SQLITE, sqlite_path=db_path)
        with pytest.raises(RuntimeError):
            async with open_store(config) as store:
                opened = store
                raise RuntimeError("boom")
        assert opened.conn is None
