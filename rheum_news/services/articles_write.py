from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, TypeVar

from rheum_news.core.errors import BulkCreateError, UpstreamError
from rheum_news.db.airtable import MAX_RECORDS_PER_WRITE, airtable
from rheum_news.models.schemas import Article, ArticleInput
from rheum_news.services.transform import (
    SAVED_FIELD,
    build_upstream_fields,
    to_article,
    validate_article_input,
)

logger = logging.getLogger("rheum_news.articles")

T = TypeVar("T")


@dataclass
class BulkResult:
    articles: List[Article] = field(default_factory=list)
    chunks_committed: int = 0
    chunks_total: int = 0

    @property
    def created(self) -> int:
        return len(self.articles)


def chunk(items: Sequence[T], size: int = MAX_RECORDS_PER_WRITE) -> List[List[T]]:
    """Split into contiguous runs of at most ``size`` items, keeping order."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


async def create_article(payload: ArticleInput) -> Article:
    validate_article_input(payload)
    records = await airtable().create_records([build_upstream_fields(payload)])
    article = to_article(records[0])
    logger.info("Article created", extra={"event": "article_created", "article_id": article.id})
    return article


async def chunked_create(payloads: Sequence[ArticleInput]) -> BulkResult:
    """Create articles in sequential chunks of at most 10.

    Every payload is validated before the first write. If a chunk fails, later
    chunks are skipped and earlier ones stay committed; the raised
    BulkCreateError reports how far it got.
    """
    for i, payload in enumerate(payloads):
        validate_article_input(payload, index=i)

    batches = chunk([build_upstream_fields(p, keep_saved=False) for p in payloads])
    result = BulkResult(chunks_total=len(batches))
    client = airtable()
    for n, batch in enumerate(batches):
        try:
            records = await client.create_records(batch)
        except UpstreamError as exc:
            logger.error(
                "Bulk create stopped at chunk %d of %d",
                n + 1,
                len(batches),
                extra={"event": "bulk_create_partial", "created_count": result.created},
            )
            raise BulkCreateError(
                exc,
                chunks_committed=n,
                chunks_total=len(batches),
                articles=result.articles,
            ) from exc
        result.articles.extend(to_article(r) for r in records)
        result.chunks_committed = n + 1
    logger.info(
        "Bulk created %d articles in %d chunks",
        result.created,
        result.chunks_total,
        extra={"event": "bulk_create_done"},
    )
    return result


async def toggle_saved(article_id: str) -> Article:
    # Read-then-write without a version check: two concurrent toggles that both
    # read False both write True.
    client = airtable()
    current = to_article(await client.get_record(article_id))
    updated = await client.update_record(article_id, {SAVED_FIELD: not current.saved})
    return to_article(updated)
