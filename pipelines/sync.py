"""Sync job: mirror Markdown posts from a GitHub repository into the store.

One run validates settings, opens the store, lists the content directory
and upserts every ``.md`` file by slug, one file at a time in listing
order. A file that cannot be fetched or parsed is recorded in the run
report and does not stop the others. Posts are never deleted.

Usage: python -m pipelines [--path blogs] [--log-level DEBUG] [--json-logs]
"""

import asyncio
import logging
import sys
from argparse import ArgumentParser
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from config import (
    ConfigurationError,
    DatabaseConfig,
    Settings,
    database_config_from_settings,
    open_store
)
from observability.logging import setup_logging
from store import Post, StoreConnectionFailure

from .content_source import GitHubContentSource, RemoteDocument
from .errors import DocumentSyncError, RemoteListingFailure
from .frontmatter_parser import build_post_fields, is_markdown_file, parse_document

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2


@dataclass
class FileFailure:
    """A document that could not be synced."""
    name: str
    reason: str
    status: Optional[int] = None


@dataclass
class SyncReport:
    """Outcome of one sync run."""
    synced: List[str] = field(default_factory=list)
    failed: List[FileFailure] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    listing_error: Optional[str] = None
    listing_status: Optional[int] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.listing_error is None and not self.failed

    def finish(self):
        """Mark the run as finished."""
        self.finished_at = datetime.now(timezone.utc)

    def summary(self) -> str:
        return (f"synced={len(self.synced)} failed={len(self.failed)} "
                f"skipped={len(self.skipped)} listing_error={self.listing_error is not None}")


def is_candidate(document: RemoteDocument) -> bool:
    """Only regular ``.md`` files are posts."""
    return document.type == 'file' and is_markdown_file(document.name)


class SyncEngine:
    """Reconciles one GitHub directory of Markdown posts into the store."""

    def __init__(self,
                 settings: Settings,
                 source: Optional[GitHubContentSource] = None,
                 store_config: Optional[DatabaseConfig] = None):
        """Initialize engine.

        Args:
            settings: Application settings
            source: Content source to use instead of one built from settings
            store_config: Store configuration to use instead of DATABASE_URL
        """
        self.settings = settings
        self._source = source
        self._store_config = store_config

    def _make_source(self) -> GitHubContentSource:
        if self._source is not None:
            return self._source
        return GitHubContentSource(
            token=self.settings.github_token,
            owner=self.settings.github_repo_owner,
            repo=self.settings.github_repo_name,
            api_base=self.settings.github_api_url,
            timeout=self.settings.github_timeout_seconds
        )

    async def run(self) -> SyncReport:
        """Run one sync pass.

        Raises ConfigurationError before anything else is attempted and
        StoreConnectionFailure before any remote call. Store errors during
        an upsert abort the run; the store is closed on every path.
        """
        logger.info("Starting GitHub sync process")
        self.settings.require_sync_settings()
        store_config = self._store_config or database_config_from_settings(self.settings)

        report = SyncReport()
        async with open_store(store_config) as store:
            logger.info("Store connected for sync")
            async with self._make_source() as source:
                await self._sync_directory(store, source, report)
        logger.info("Store disconnected")

        report.finish()
        logger.info(f"GitHub sync finished: {report.summary()}",
                    extra={"synced": len(report.synced), "failed": len(report.failed)})
        return report

    async def _sync_directory(self, store, source, report: SyncReport):
        path = self.settings.content_path
        logger.info(f"Fetching posts from {self.settings.github_repo_owner}/"
                    f"{self.settings.github_repo_name}/{path}")
        try:
            listing = await source.list_files(path)
        except RemoteListingFailure as e:
            logger.error(f"Error fetching from GitHub API: {e.status} {e.message}",
                         extra={"status": e.status})
            report.listing_error = e.message
            report.listing_status = e.status
            return

        documents = []
        for entry in listing:
            if is_candidate(entry):
                documents.append(entry)
            else:
                report.skipped.append(entry.name)
        logger.info(f"Found {len(documents)} markdown files to process")

        for document in documents:
            logger.info(f"Processing: {document.name}", extra={"document": document.name})
            try:
                post = await self.sync_document(store, source, document)
            except DocumentSyncError as e:
                logger.error(f"Failed to sync {e.name}: {e.reason}",
                             extra={"document": e.name, "status": e.status})
                report.failed.append(FileFailure(e.name, e.reason, e.status))
                continue
            report.synced.append(post.slug)
            logger.info(f"Successfully synced post: {post.slug}",
                        extra={"document": document.name, "slug": post.slug})

    async def sync_document(self, store, source, document: RemoteDocument) -> Post:
        """Fetch, parse and upsert a single document."""
        text = await source.fetch_raw(document)
        parsed = parse_document(document.name, text)
        fields = build_post_fields(parsed)
        return await store.upsert_by_slug(parsed.slug, fields)


async def run_sync(settings: Settings) -> SyncReport:
    """Run one sync pass with sources built from settings."""
    return await SyncEngine(settings).run()


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(description="Mirror Markdown posts from GitHub into the Inkwell store.")
    parser.add_argument(
        "--path", type=str, default=None,
        help="Repository directory to sync (default: CONTENT_PATH or 'blogs')"
    )
    parser.add_argument(
        "--log-level", type=str, default=None,
        help="Log level (default: LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--json-logs", action="store_true",
        help="Emit JSON log lines"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        setup_logging(Settings(), "inkwell-sync", level=args.log_level, use_json=args.json_logs or None)
        logger.error(f"Error: {e}")
        return EXIT_FATAL
    if args.path:
        settings = settings.model_copy(update={'content_path': args.path})

    setup_logging(settings, "inkwell-sync", level=args.log_level, use_json=args.json_logs or None)

    try:
        report = asyncio.run(run_sync(settings))
    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        return EXIT_FATAL
    except StoreConnectionFailure as e:
        logger.error(f"Store connection failed: {e.reason}", extra={"store": e.target})
        return EXIT_FATAL

    return EXIT_OK if report.ok else EXIT_PARTIAL


if __name__ == "__main__":
    sys.exit(main())
