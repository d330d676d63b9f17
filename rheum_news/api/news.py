# rheum_news/api/news.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Query
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from rheum_news import config
from rheum_news.core.errors import BulkCreateError, NotFound, UpstreamError, ValidationFailed
from rheum_news.core.formula import FilterRequest
from rheum_news.core.responses import fail, ok
from rheum_news.models.schemas import ArticleInput
from rheum_news.services import articles as svc

router = APIRouter(prefix="/api/news", tags=["news"])
logger = logging.getLogger("rheum_news.api.news")


def _upstream_failure(exc: UpstreamError, fallback: str, **extra: Any) -> JSONResponse:
    logger.error(
        "%s: %s",
        fallback,
        exc,
        extra={"event": "upstream_failure", "status": exc.status},
    )
    return fail(500, exc.message or fallback, **extra)


# -----------------------
#  Listings (static paths first, before /{article_id})
# -----------------------

@router.get("", summary="List articles, newest first, with optional filters")
async def api_list_news(
    category: Optional[str] = None,
    source: Optional[str] = None,
    priority: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(config.NEWS_DEFAULT_LIMIT, ge=1, le=1000),
):
    filters = FilterRequest(category=category, source=source, priority=priority, search=search)
    try:
        articles = await svc.list_articles(filters, limit=limit)
    except UpstreamError as exc:
        return _upstream_failure(exc, "Failed to fetch articles")
    return ok(
        data=articles,
        total=len(articles),
        filters=filters.as_dict(),
        pagination={"limit": limit, "hasMore": len(articles) == limit},
    )


@router.get("/saved", summary="Saved articles only")
async def api_list_saved():
    try:
        articles = await svc.list_saved_articles()
    except UpstreamError as exc:
        return _upstream_failure(exc, "Failed to fetch saved articles")
    return ok(data=articles, total=len(articles))


# -----------------------
#  Creation
# -----------------------

@router.post("", summary="Create one article")
async def api_create_article(payload: ArticleInput):
    try:
        article = await svc.create_article(payload)
    except ValidationFailed as exc:
        return fail(400, exc.message)
    except UpstreamError as exc:
        return _upstream_failure(exc, "Failed to create article")
    return ok(201, message="Article created successfully", data=article)


@router.post("/bulk", summary="Create many articles in chunks of 10")
async def api_bulk_create(body: Dict[str, Any] = Body(...)):
    raw: Any = body.get("articles")
    if not isinstance(raw, list):
        return fail(400, "Articles array is required")

    payloads: List[ArticleInput] = []
    for i, item in enumerate(raw):
        try:
            payloads.append(ArticleInput.model_validate(item))
        except ValidationError:
            return fail(400, f"Article at index {i} is not a valid article")

    try:
        result = await svc.chunked_create(payloads)
    except ValidationFailed as exc:
        return fail(400, exc.message)
    except BulkCreateError as exc:
        return _upstream_failure(
            exc,
            "Failed to bulk create articles",
            created=exc.created,
            chunksCommitted=exc.chunks_committed,
            chunksTotal=exc.chunks_total,
            data=exc.articles,
        )
    except UpstreamError as exc:
        return _upstream_failure(exc, "Failed to bulk create articles")
    return ok(
        message=f"Successfully created {result.created} articles",
        created=result.created,
        chunks=result.chunks_total,
        data=result.articles,
    )


# -----------------------
#  Single article, after the static paths
# -----------------------

@router.get("/{article_id}", summary="One article by Airtable record id")
async def api_get_article(article_id: str):
    try:
        article = await svc.get_article(article_id)
    except NotFound:
        return fail(404, "Article not found")
    except UpstreamError as exc:
        return _upstream_failure(exc, "Failed to fetch article")
    return ok(data=article)


@router.post("/{article_id}/save", summary="Toggle the saved flag")
async def api_toggle_saved(article_id: str):
    try:
        article = await svc.toggle_saved(article_id)
    except NotFound:
        return fail(404, "Article not found")
    except UpstreamError as exc:
        return _upstream_failure(exc, "Failed to save article")
    return ok(
        message="Article saved" if article.saved else "Article unsaved",
        saved=article.saved,
        data=article,
    )
