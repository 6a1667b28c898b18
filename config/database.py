"""Database configuration and factory for Inkwell.

Provides unified interface for store operations with support for
both SQLite (development) and PostgreSQL (production) backends.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Union
from enum import Enum
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from store.postgres_adapter import PostgresAdapter, PostgresConfig
from store.sqlite_adapter import SQLiteAdapter

from .settings import ConfigurationError, Settings

logger = logging.getLogger(__name__)

StoreAdapter = Union[PostgresAdapter, SQLiteAdapter]


class DatabaseType(str, Enum):
    """Supported database types."""
    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class DatabaseConfig(BaseModel):
    """Database configuration."""
    type: DatabaseType = Field(default=DatabaseType.SQLITE, description="Database type")

    # SQLite configuration
    sqlite_path: str = Field(default="inkwell.db", description="SQLite database path")

    # PostgreSQL configuration
    postgres: PostgresConfig = Field(default_factory=PostgresConfig, description="PostgreSQL configuration")

    @classmethod
    def from_url(cls, url: str) -> 'DatabaseConfig':
        """Create configuration from a store connection string.

        ``sqlite:///relative/path.db``, ``sqlite:////absolute/path.db`` and
        ``sqlite://:memory:`` select SQLite; ``postgresql://`` and
        ``postgres://`` select PostgreSQL.
        """
        scheme = urlparse(url).scheme.lower()

        if scheme in ('postgresql', 'postgres'):
            return cls(type=DatabaseType.POSTGRESQL, postgres=PostgresConfig(dsn=url))
        if scheme == 'sqlite':
            path = url[len('sqlite://'):]
            if path.startswith('/'):
                path = path[1:]
            if not path:
                raise ValueError(f"No database path in store URL: {url}")
            return cls(type=DatabaseType.SQLITE, sqlite_path=path)

        raise ValueError(f"Unsupported store URL scheme: {scheme or url}")


def database_config_from_settings(settings: Settings) -> DatabaseConfig:
    """Build the store configuration from DATABASE_URL."""
    url = settings.require_database_url()
    try:
        return DatabaseConfig.from_url(url)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e


def create_store_adapter(config: DatabaseConfig) -> StoreAdapter:
    """Build an uninitialized store adapter for the configured backend."""
    if config.type == DatabaseType.POSTGRESQL:
        return PostgresAdapter(config.postgres)
    return SQLiteAdapter(config.sqlite_path)


@asynccontextmanager
async def open_store(config: DatabaseConfig) -> AsyncIterator[StoreAdapter]:
    """Open a store for the duration of the block and always close it.

    Raises StoreConnectionFailure when the store cannot be opened.
    """
    adapter = create_store_adapter(config)
    logger.info(f"Initializing {config.type.value} store adapter")
    await adapter.initialize()
    try:
        yield adapter
    finally:
        await adapter.close()
