"""GitHub content source for the sync job.

Lists a repository directory through the GitHub contents API and downloads
the raw text of the files it contains.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

import aiohttp

from .errors import RemoteFetchFailure, RemoteListingFailure

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github.v3+json"
USER_AGENT = "Inkwell-Sync/0.1"


@dataclass
class RemoteDocument:
    """One entry of a remote directory listing."""
    name: str
    type: str
    download_url: Optional[str] = None
    path: Optional[str] = None


async def _error_message(response: aiohttp.ClientResponse) -> str:
    """Best-effort extraction of GitHub's ``message`` field."""
    try:
        payload = await response.json(content_type=None)
    except (aiohttp.ContentTypeError, ValueError):
        return response.reason or "request failed"
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason or "request failed"


class GitHubContentSource:
    """Read-only client for one GitHub repository."""

    def __init__(self,
                 token: str,
                 owner: str,
                 repo: str,
                 api_base: str = "https://api.github.com",
                 timeout: float = 30.0):
        """Initialize source.

        Args:
            token: GitHub token sent as ``Authorization: token <token>``
            owner: Repository owner or organisation
            repo: Repository name
            api_base: GitHub API base URL
            timeout: Total timeout for each request in seconds
        """
        self.token = token
        self.owner = owner
        self.repo = repo
        self.api_base = api_base.rstrip('/')
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={'User-Agent': USER_AGENT}
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None

    def contents_url(self, path: str) -> str:
        return f"{self.api_base}/repos/{self.owner}/{self.repo}/contents/{path.strip('/')}"

    async def list_files(self, path: str) -> List[RemoteDocument]:
        """List a repository directory.

        Raises RemoteListingFailure on transport errors, non-2xx responses
        and payloads that are not a directory listing.
        """
        url = self.contents_url(path)
        headers = {
            'Authorization': f"token {self.token}",
            'Accept': GITHUB_ACCEPT,
        }
        logger.debug(f"Listing {url}")

        try:
            async with self.session.get(url, headers=headers) as response:
                if response.status >= 400:
                    raise RemoteListingFailure(response.status, await _error_message(response))
                payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RemoteListingFailure(None, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise RemoteListingFailure(None, f"invalid JSON in listing: {e}") from e

        if not isinstance(payload, list):
            raise RemoteListingFailure(None, f"{path} is not a directory")

        return [
            RemoteDocument(
                name=entry.get('name', ''),
                type=entry.get('type', ''),
                download_url=entry.get('download_url'),
                path=entry.get('path')
            )
            for entry in payload
            if isinstance(entry, dict)
        ]

    async def fetch_raw(self, document: RemoteDocument) -> str:
        """Download the raw text of a listed file.

        Raises RemoteFetchFailure carrying the file name and HTTP status.
        """
        if not document.download_url:
            raise RemoteFetchFailure(document.name, "no download URL in listing")

        try:
            async with self.session.get(document.download_url) as response:
                if response.status >= 400:
                    raise RemoteFetchFailure(
                        document.name,
                        await _error_message(response),
                        status=response.status
                    )
                return await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RemoteFetchFailure(document.name, str(e) or type(e).__name__) from e
        except UnicodeDecodeError as e:
            raise RemoteFetchFailure(document.name, f"not valid text: {e}") from e
