from __future__ import annotations

import math
from collections import Counter
from typing import Any, Dict

from rheum_news.core.errors import UpstreamError
from rheum_news.db.airtable import airtable
from rheum_news.models.schemas import ArticleAnalytics, ArticleMetadata
from rheum_news.services.transform import to_article

UNKNOWN = "Unknown"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


async def get_metadata() -> ArticleMetadata:
    articles = [to_article(r) for r in await airtable().list_records()]
    return ArticleMetadata(
        categories=sorted({a.category for a in articles if a.category}),
        sources=sorted({a.source for a in articles if a.source}),
        priorities=sorted({a.priority for a in articles if a.priority}),
        total_articles=len(articles),
    )


async def get_analytics() -> ArticleAnalytics:
    articles = [to_article(r) for r in await airtable().list_records()]
    total = len(articles)
    relevance = sum(a.relevance_score for a in articles)
    return ArticleAnalytics(
        total_articles=total,
        saved_articles=sum(1 for a in articles if a.saved),
        by_source=dict(Counter(a.source or UNKNOWN for a in articles)),
        by_category=dict(Counter(a.category or UNKNOWN for a in articles)),
        by_priority=dict(Counter(a.priority or UNKNOWN for a in articles)),
        average_relevance_score=_round_half_up(relevance / total) if total else 0,
    )


async def probe_upstream() -> Dict[str, Any]:
    """Connectivity check used by /api/health. Never raises for upstream failures."""
    client = airtable()
    try:
        records = await client.list_records(max_records=1)
    except UpstreamError as exc:
        return {"connected": False, "error": exc.message or str(exc)}
    return {
        "connected": True,
        "baseId": client.base_id,
        "tableId": client.table_id,
        "recordCount": len(records),
    }
