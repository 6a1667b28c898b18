"""Store package for Inkwell.

Provides the Post model and the SQLite and PostgreSQL store adapters.
"""

from .errors import StoreConnectionFailure
from .models import Post, PostFields
from .postgres_adapter import PostgresAdapter, PostgresConfig
from .sqlite_adapter import SQLiteAdapter

__all__ = [
    'StoreConnectionFailure',
    'Post',
    'PostFields',
    'PostgresAdapter',
    'PostgresConfig',
    'SQLiteAdapter'
]
