"""Pipelines package for Inkwell.

Provides Markdown rendering, front-matter parsing, the GitHub content
source and the sync job.
"""

from .markdown_renderer import render_markdown
from .errors import (
    RemoteListingFailure,
    DocumentSyncError,
    RemoteFetchFailure,
    DocumentParseError
)
from .frontmatter_parser import (
    ParsedDocument,
    derive_slug,
    parse_document,
    parse_post_date,
    build_post_fields
)
from .content_source import GitHubContentSource, RemoteDocument
from .sync import SyncEngine, SyncReport, FileFailure, run_sync

__all__ = [
    # Renderer
    'render_markdown',

    # Errors
    'RemoteListingFailure',
    'DocumentSyncError',
    'RemoteFetchFailure',
    'DocumentParseError',

    # Parsing
    'ParsedDocument',
    'derive_slug',
    'parse_document',
    'parse_post_date',
    'build_post_fields',

    # Sync
    'GitHubContentSource',
    'RemoteDocument',
    'SyncEngine',
    'SyncReport',
    'FileFailure',
    'run_sync'
]
