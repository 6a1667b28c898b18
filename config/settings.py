"""Application settings for Inkwell.

Settings are read from the environment (and a ``.env`` file, if present)
exactly once, by ``Settings.from_env()``. The resulting object is passed
explicitly to the sync engine, the API app factory and the client.
"""

import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError


class ConfigurationError(Exception):
    """Settings are missing or invalid."""


class ConfigurationMissing(ConfigurationError):
    """One or more required settings are not set."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required settings: {', '.join(self.missing)}")


def _env_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_number(name: str, default: str, cast):
    value = os.getenv(name, default)
    try:
        return cast(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


class Settings(BaseModel):
    """Inkwell configuration."""
    # Content source
    github_token: Optional[str] = Field(default=None, description="GitHub API token")
    github_repo_owner: Optional[str] = Field(default=None, description="Owner of the content repository")
    github_repo_name: Optional[str] = Field(default=None, description="Name of the content repository")
    github_api_url: str = Field(default="https://api.github.com", description="GitHub API base URL")
    github_timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout for each GitHub request")
    content_path: str = Field(default="blogs", description="Repository directory holding the posts")

    # Store
    database_url: Optional[str] = Field(default=None, description="Store connection string")

    # HTTP API
    api_prefix: str = Field(default="/api", description="Prefix the posts routes are mounted under")
    api_host: str = Field(default="0.0.0.0", description="API bind address")
    api_port: int = Field(default=5000, description="API port")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    # Client
    api_url: str = Field(default="http://localhost:5000/api", description="Base URL the client talks to")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    log_file: Optional[str] = Field(default=None, description="Optional JSON log file")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'Settings':
        """Create settings from environment variables."""
        load_dotenv(dotenv_path)

        cors = os.getenv('CORS_ORIGINS', '*')
        try:
            return cls(
                github_token=os.getenv('GITHUB_TOKEN') or None,
                github_repo_owner=os.getenv('GITHUB_REPO_OWNER') or None,
                github_repo_name=os.getenv('GITHUB_REPO_NAME') or None,
                github_api_url=os.getenv('GITHUB_API_URL', 'https://api.github.com'),
                github_timeout_seconds=_env_number('GITHUB_TIMEOUT_SECONDS', '30', float),
                content_path=os.getenv('CONTENT_PATH', 'blogs'),
                database_url=os.getenv('DATABASE_URL') or None,
                api_prefix=os.getenv('API_PREFIX', '/api'),
                api_host=os.getenv('API_HOST', '0.0.0.0'),
                api_port=_env_number('PORT', '5000', int),
                cors_origins=[o.strip() for o in cors.split(',') if o.strip()],
                api_url=os.getenv('INKWELL_API_URL', 'http://localhost:5000/api'),
                log_level=os.getenv('LOG_LEVEL', 'INFO'),
                log_json=_env_bool(os.getenv('LOG_JSON')),
                log_file=os.getenv('LOG_FILE') or None
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e

    def require_sync_settings(self) -> None:
        """Raise ConfigurationMissing unless every setting the sync job needs is set."""
        required = {
            'GITHUB_TOKEN': self.github_token,
            'GITHUB_REPO_OWNER': self.github_repo_owner,
            'GITHUB_REPO_NAME': self.github_repo_name,
            'DATABASE_URL': self.database_url,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigurationMissing(missing)

    def require_database_url(self) -> str:
        """Return the store connection string or raise ConfigurationMissing."""
        if not self.database_url:
            raise ConfigurationMissing(['DATABASE_URL'])
        return self.database_url
