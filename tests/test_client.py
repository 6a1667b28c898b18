from datetime import datetime, timezone

import aiohttp
import pytest

from client import BlogClient, BlogClientError, render_post_list, render_post_page
from store import Post

POST_JSON = {
    "slug": "hello",
    "title": "Hello <World>",
    "date": "2024-05-03T00:00:00+00:00",
    "content": "# Hi\n\nSome **bold** text.",
    "tags": ["news", "a&b"],
    "likes": 4,
}


class FakeResponse:
    def __init__(self, status=200, payload=None):
        self.status = status
        self._payload = payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def json(self, **kwargs):
        return self._payload


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def _request(self, method, url):
        self.calls.append((method, url))
        if isinstance(self.response, BaseException):
            raise self.response
        return self.response

    def get(self, url, **kwargs):
        return self._request("GET", url)

    def post(self, url, **kwargs):
        return self._request("POST", url)


def make_client(response):
    client = BlogClient("http://blog.local/api/")
    client.session = FakeSession(response)
    return client


class TestBlogClient:
    """Requests and response handling."""

    @pytest.mark.asyncio
    async def test_get_posts(self):
        client = make_client(FakeResponse(payload=[POST_JSON]))

        posts = await client.get_posts()

        assert client.session.calls == [("GET", "http://blog.local/api/posts")]
        assert posts[0].slug == "hello"
        assert posts[0].likes == 4
        assert posts[0].date == datetime(2024, 5, 3, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_get_posts_error_status(self):
        client = make_client(FakeResponse(status=500, payload={"detail": "Server Error"}))

        with pytest.raises(BlogClientError) as exc_info:
            await client.get_posts()

        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_get_post_quotes_slug(self):
        client = make_client(FakeResponse(payload=POST_JSON))

        post = await client.get_post("a b/c")

        assert post.title == "Hello <World>"
        assert client.session.calls == [("GET", "http://blog.local/api/posts/a%20b%2Fc")]

    @pytest.mark.asyncio
    async def test_get_post_not_found_returns_none(self):
        client = make_client(FakeResponse(status=404, payload={"msg": "Post not found"}))
        assert await client.get_post("missing") is None

    @pytest.mark.asyncio
    async def test_like_post(self):
        client = make_client(FakeResponse(payload=dict(POST_JSON, likes=5)))

        post = await client.like_post("hello")

        assert post.likes == 5
        assert client.session.calls == [("POST", "http://blog.local/api/posts/hello/like")]

    @pytest.mark.asyncio
    async def test_like_unknown_post_raises(self):
        client = make_client(FakeResponse(status=404, payload={"msg": "Post not found"}))

        with pytest.raises(BlogClientError) as exc_info:
            await client.like_post("ghost")

        assert exc_info.value.status == 404

    @pytest.mark.asyncio
    async def test_transport_error_is_wrapped(self):
        client = make_client(aiohttp.ClientConnectionError("refused"))

        with pytest.raises(BlogClientError) as exc_info:
            await client.get_posts()

        assert exc_info.value.status is None


class TestRender:
    """HTML views of posts."""

    def test_post_page(self):
        html = render_post_page(Post.model_validate(POST_JSON))

        assert "Hello &lt;World&gt;" in html
        assert "May 03, 2024" in html
        assert "4 likes" in html
        assert "#a&amp;b" in html
        assert "<h1>Hi</h1>" in html
        assert "<strong>bold</strong>" in html

    def test_post_list_links_each_post(self):
        older = Post.model_validate(dict(POST_JSON, slug="older", title="Older"))
        html = render_post_list([Post.model_validate(POST_JSON), older], base_path="/blog/")

        assert html.startswith("<ul class='post-list'>")
        assert "href='/blog/hello'" in html
        assert "href='/blog/older'" in html
        assert html.index("/blog/hello") < html.index("/blog/older")

    def test_empty_list(self):
        assert render_post_list([]) == "<ul class='post-list'></ul>"
