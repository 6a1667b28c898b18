"""Client package for Inkwell.

Provides the async API client and HTML views of posts.
"""

from .blog_client import BlogClient, BlogClientError
from .render import render_post_page, render_post_list

__all__ = [
    'BlogClient',
    'BlogClientError',
    'render_post_page',
    'render_post_list'
]
