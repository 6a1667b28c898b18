"""Front-matter parsing for post sources.

Turns the raw text of a Markdown file into the fields the store keeps for
a post: YAML front-matter supplies title, date and tags; the remainder is
the body.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

import frontmatter
import yaml

from store.models import PostFields

from .errors import DocumentParseError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"
DEFAULT_TITLE = "Untitled Post"


@dataclass
class ParsedDocument:
    """A source file split into metadata and Markdown body."""
    slug: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    body: str = ""


def is_markdown_file(name: str) -> bool:
    return name.endswith(MARKDOWN_SUFFIX)


def derive_slug(filename: str) -> str:
    """'my-first-post.md' -> 'my-first-post'."""
    if filename.endswith(MARKDOWN_SUFFIX):
        return filename[:-len(MARKDOWN_SUFFIX)]
    return filename


def parse_post_date(value: Any, now: Optional[datetime] = None) -> datetime:
    """Interpret a front-matter date, falling back to ``now`` (UTC).

    YAML already turns unquoted ISO dates into date/datetime objects; quoted
    strings are parsed as ISO 8601. Naive values are taken to be UTC; aware
    values are converted to UTC, and one that falls outside the datetime
    range once converted (such as year 1 at a positive offset) falls back.
    """
    fallback = now or datetime.now(timezone.utc)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            logger.warning(f"Unparseable post date {value!r}, using ingestion time")
            return fallback
    else:
        if value is not None:
            logger.warning(f"Unsupported post date {value!r}, using ingestion time")
        return fallback

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        logger.warning(f"Post date {value!r} is out of range in UTC, using ingestion time")
        return fallback


def normalize_tags(value: Any) -> List[str]:
    if value is None or value == '':
        return []
    if isinstance(value, (list, tuple)):
        return [str(tag) for tag in value if tag is not None]
    return [str(value)]


def parse_document(filename: str, text: str) -> ParsedDocument:
    """Split a Markdown source into slug, metadata and body.

    Raises DocumentParseError if the front-matter block cannot be parsed.
    """
    try:
        post = frontmatter.loads(text)
    except (yaml.YAMLError, ValueError) as e:
        raise DocumentParseError(filename, f"invalid front-matter: {e}") from e

    metadata = post.metadata if isinstance(post.metadata, dict) else {}
    return ParsedDocument(slug=derive_slug(filename), metadata=metadata, body=post.content)


def build_post_fields(document: ParsedDocument, now: Optional[datetime] = None) -> PostFields:
    """Apply defaults to parsed metadata and produce the synced field set."""
    metadata = document.metadata
    return PostFields(
        title=str(metadata.get('title') or DEFAULT_TITLE),
        date=parse_post_date(metadata.get('date'), now=now),
        content=document.body,
        tags=normalize_tags(metadata.get('tags'))
    )
