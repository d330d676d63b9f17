from __future__ import annotations

from typing import Iterable

SEARCH_KEYS = ("title", "summary", "keywords")


def matches(article: dict, *, search: str = "", category: str = "", source: str = "") -> bool:
    if search:
        needle = search.lower()
        if not any(needle in str(article.get(k) or "").lower() for k in SEARCH_KEYS):
            return False
    if category and article.get("category") != category:
        return False
    if source and article.get("source") != source:
        return False
    return True


def filter_articles(
    articles: Iterable[dict],
    *,
    search: str = "",
    category: str = "",
    source: str = "",
) -> list[dict]:
    """In-memory feed filter: substring search plus exact category/source."""
    return [a for a in articles if matches(a, search=search, category=category, source=source)]


def distinct(articles: Iterable[dict], key: str) -> list[str]:
    return sorted({str(a[key]) for a in articles if a.get(key)})
