# rheum_news/api/meta.py
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body

from rheum_news.core.errors import UpstreamError
from rheum_news.core.responses import fail, ok
from rheum_news.services import articles as svc
from rheum_news.services.preferences import get_preferences

router = APIRouter(prefix="/api", tags=["meta"])
logger = logging.getLogger("rheum_news.api.meta")


@router.get("/health", summary="Liveness plus Airtable connectivity")
async def api_health():
    upstream = await svc.probe_upstream()
    if upstream["connected"]:
        status, message = "OK", "Rheumatology News API is running!"
    else:
        logger.warning("Health probe could not reach Airtable", extra={"event": "health_degraded"})
        status, message = "WARNING", "API running but Airtable connection failed"
    return ok(status=status, message=message, airtable=upstream)


@router.get("/metadata", summary="Distinct filter values and total count")
async def api_metadata():
    try:
        meta = await svc.get_metadata()
    except UpstreamError as exc:
        logger.error("Failed to fetch metadata: %s", exc, extra={"event": "upstream_failure"})
        return fail(500, exc.message or "Failed to fetch metadata")
    return ok(data=meta)


@router.get("/analytics", summary="Counts by source, category, priority")
async def api_analytics():
    try:
        stats = await svc.get_analytics()
    except UpstreamError as exc:
        logger.error("Failed to fetch analytics: %s", exc, extra={"event": "upstream_failure"})
        return fail(500, exc.message or "Failed to fetch analytics")
    return ok(data=stats)


@router.get("/preferences")
async def api_get_preferences():
    return ok(preferences=get_preferences())


@router.put("/preferences")
async def api_put_preferences(preferences: Dict[str, Any] = Body(...)):
    # Echo only; nothing is persisted
    return ok(message="Preferences updated successfully", preferences=preferences)
