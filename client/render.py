"""HTML views of posts for the Inkwell client.

Metadata is escaped here; the post body comes from the Markdown renderer
and is inserted as trusted HTML.
"""

from html import escape
from typing import Iterable

from pipelines.markdown_renderer import render_markdown
from store.models import Post

DATE_FORMAT = "%B %d, %Y"


def render_tags(tags: Iterable[str]) -> str:
    return "".join(f"<span class='tag'>#{escape(tag)}</span>" for tag in tags)


def render_post_page(post: Post) -> str:
    """Full view of one post."""
    return (
        "<article class='post'>"
        f"<h1 class='post-title'>{escape(post.title)}</h1>"
        f"<p class='post-meta'><time datetime='{post.date.isoformat()}'>"
        f"{post.date.strftime(DATE_FORMAT)}</time>"
        f"<span class='likes'>{post.likes} likes</span></p>"
        f"<div class='tags'>{render_tags(post.tags)}</div>"
        f"<div class='post-body'>{render_markdown(post.content)}</div>"
        "</article>"
    )


def render_post_list(posts: Iterable[Post], base_path: str = "/posts") -> str:
    """Index of posts linking to each post page."""
    items = "".join(
        "<li class='post-item'>"
        f"<a href='{base_path.rstrip('/')}/{escape(post.slug, quote=True)}'>{escape(post.title)}</a>"
        f"<time datetime='{post.date.isoformat()}'>{post.date.strftime(DATE_FORMAT)}</time>"
        f"<div class='tags'>{render_tags(post.tags)}</div>"
        "</li>"
        for post in posts
    )
    return f"<ul class='post-list'>{items}</ul>"
