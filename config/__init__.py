"""Configuration module for Inkwell.

Provides application settings and the store factory.
"""

from .settings import Settings, ConfigurationError, ConfigurationMissing
from .database import (
    DatabaseConfig,
    DatabaseType,
    StoreAdapter,
    create_store_adapter,
    database_config_from_settings,
    open_store
)

__all__ = [
    'Settings',
    'ConfigurationError',
    'ConfigurationMissing',
    'DatabaseConfig',
    'DatabaseType',
    'StoreAdapter',
    'create_store_adapter',
    'database_config_from_settings',
    'open_store'
]
