"""Façade that re-exports the article service functions.

Routers import this module so tests can patch a single place.
"""

from .articles_read import get_article, list_articles, list_saved_articles  # noqa: F401
from .articles_stats import get_analytics, get_metadata, probe_upstream  # noqa: F401
from .articles_write import BulkResult, chunk, chunked_create, create_article, toggle_saved  # noqa: F401

__all__ = [
    "get_article",
    "list_articles",
    "list_saved_articles",
    "get_analytics",
    "get_metadata",
    "probe_upstream",
    "BulkResult",
    "chunk",
    "chunked_create",
    "create_article",
    "toggle_saved",
]
