from __future__ import annotations

from typing import List

from rheum_news import config
from rheum_news.core.formula import FilterRequest, build_filter, saved_only
from rheum_news.db.airtable import airtable
from rheum_news.models.schemas import Article
from rheum_news.services.transform import PUBLISHED_DATE_FIELD, to_article

NEWEST_FIRST = [{"field": PUBLISHED_DATE_FIELD, "direction": "desc"}]


async def list_articles(filters: FilterRequest, limit: int = config.NEWS_DEFAULT_LIMIT) -> List[Article]:
    records = await airtable().list_records(
        max_records=limit,
        sort=NEWEST_FIRST,
        filter_by_formula=build_filter(filters) or None,
    )
    return [to_article(r) for r in records]


async def get_article(article_id: str) -> Article:
    record = await airtable().get_record(article_id)
    return to_article(record)


async def list_saved_articles() -> List[Article]:
    records = await airtable().list_records(sort=NEWEST_FIRST, filter_by_formula=saved_only())
    return [to_article(r) for r in records]
