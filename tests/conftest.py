import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config import Settings
from pipelines.content_source import RemoteDocument
from pipelines.errors import RemoteFetchFailure, RemoteListingFailure
from store import SQLiteAdapter


class FakeContentSource:
    """In-memory stand-in for GitHubContentSource."""

    def __init__(self,
                 files: Dict[str, str],
                 listing: Optional[List[RemoteDocument]] = None,
                 listing_error: Optional[RemoteListingFailure] = None,
                 fetch_errors: Optional[Dict[str, int]] = None):
        self.files = files
        self.listing = listing if listing is not None else [
            RemoteDocument(name=name, type='file', download_url=f"https://raw.example.com/blogs/{name}")
            for name in files
        ]
        self.listing_error = listing_error
        self.fetch_errors = fetch_errors or {}
        self.listed_paths: List[str] = []
        self.fetched: List[str] = []
        self.entered = False
        self.exited = False

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.exited = True

    async def list_files(self, path: str) -> List[RemoteDocument]:
        self.listed_paths.append(path)
        if self.listing_error:
            raise self.listing_error
        return list(self.listing)

    async def fetch_raw(self, document: RemoteDocument) -> str:
        self.fetched.append(document.name)
        if document.name in self.fetch_errors:
            raise RemoteFetchFailure(document.name, "Not Found", status=self.fetch_errors[document.name])
        return self.files[document.name]


@pytest.fixture
def db_path(tmp_path):
    """Path of a fresh SQLite database file."""
    return str(tmp_path / "inkwell.db")


def run_coroutine(coro):
    """Run a coroutine on a private loop without touching the current one."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@pytest.fixture
def run_async():
    """Run a coroutine from synchronous test code."""
    return run_coroutine


@pytest.fixture
def sqlite_store(db_path):
    """Initialized SQLite store on the temporary database."""
    store = SQLiteAdapter(db_path)
    run_coroutine(store.initialize())
    yield store
    run_coroutine(store.close())


@pytest.fixture
def sync_settings(db_path):
    """Settings with every sync requirement filled in."""
    return Settings(
        github_token="test-token",
        github_repo_owner="muon",
        github_repo_name="blog",
        database_url=f"sqlite:///{db_path}"
    )


@pytest.fixture
def make_source():
    """Factory for fake content sources."""
    return FakeContentSource
