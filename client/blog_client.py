"""Async client for the Inkwell posts API."""

import logging
from typing import List, Optional
from urllib.parse import quote

import aiohttp

from store.models import Post

logger = logging.getLogger(__name__)


class BlogClientError(Exception):
    """The API answered with an error status or could not be reached."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class BlogClient:
    """Client for the posts API.

    Use as an async context manager so the HTTP session is closed:

        async with BlogClient("http://localhost:5000/api") as client:
            posts = await client.get_posts()
    """

    def __init__(self, base_url: str = "http://localhost:5000/api", timeout: float = 10.0):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self.session:
            await self.session.close()
            self.session = None

    def _post_url(self, slug: str) -> str:
        return f"{self.base_url}/posts/{quote(slug, safe='')}"

    async def get_posts(self) -> List[Post]:
        """Fetch all posts, newest first."""
        try:
            async with self.session.get(f"{self.base_url}/posts") as response:
                if response.status != 200:
                    raise BlogClientError("Failed to fetch posts", status=response.status)
                payload = await response.json()
        except aiohttp.ClientError as e:
            raise BlogClientError(f"Failed to fetch posts: {e}") from e
        return [Post.model_validate(item) for item in payload]

    async def get_post(self, slug: str) -> Optional[Post]:
        """Fetch one post; None when the API does not return it."""
        try:
            async with self.session.get(self._post_url(slug)) as response:
                if response.status != 200:
                    logger.debug(f"Post {slug} not returned: HTTP {response.status}")
                    return None
                return Post.model_validate(await response.json())
        except aiohttp.ClientError as e:
            raise BlogClientError(f"Failed to fetch post {slug}: {e}") from e

    async def like_post(self, slug: str) -> Post:
        """Like a post and return its updated state."""
        try:
            async with self.session.post(f"{self._post_url(slug)}/like") as response:
                if response.status != 200:
                    raise BlogClientError("Failed to like post", status=response.status)
                return Post.model_validate(await response.json())
        except aiohttp.ClientError as e:
            raise BlogClientError(f"Failed to like post {slug}: {e}") from e
