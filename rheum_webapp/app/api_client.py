from __future__ import annotations

from typing import Any

import httpx

from rheum_webapp.app.config import settings


class NewsClient:
    """Thin client for the news API used by the feed view.

    Every call returns the ``data`` (or equivalent) payload, or None when the
    API answers with an error status or cannot be reached.
    """

    def __init__(self, base_url: str | None = None, *, timeout: float | httpx.Timeout | None = None) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        if timeout is None:
            timeout = settings.request_timeout
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout)
        self.last_error: str | None = None

    def close(self) -> None:
        self._client.close()

    # --- Internal helper ---
    def _call(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict | None = None,
    ) -> dict | None:
        self.last_error = None
        try:
            resp = self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            self.last_error = str(exc) or exc.__class__.__name__
            return None
        try:
            data = resp.json()
        except ValueError:
            data = None
        if resp.status_code >= 400:
            if isinstance(data, dict) and isinstance(data.get("error"), str):
                self.last_error = data["error"]
            else:
                self.last_error = f"Request failed: {resp.status_code}"
            return None
        return data if isinstance(data, dict) else None

    # --- Public API ---
    def health(self) -> dict | None:
        return self._call("GET", "/api/health")

    def list_news(
        self,
        *,
        category: str | None = None,
        source: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        limit: int | None = None,
    ) -> list[dict] | None:
        params: dict = {}
        if category:
            params["category"] = category
        if source:
            params["source"] = source
        if priority:
            params["priority"] = priority
        if search:
            params["search"] = search
        if limit is not None:
            params["limit"] = limit
        body = self._call("GET", "/api/news", params=params)
        if body is None or not isinstance(body.get("data"), list):
            return None
        return body["data"]

    def get_article(self, article_id: str) -> dict | None:
        body = self._call("GET", f"/api/news/{article_id}")
        return body.get("data") if body else None

    def saved(self) -> list[dict] | None:
        body = self._call("GET", "/api/news/saved")
        if body is None or not isinstance(body.get("data"), list):
            return None
        return body["data"]

    def toggle_saved(self, article_id: str) -> dict | None:
        body = self._call("POST", f"/api/news/{article_id}/save")
        return body.get("data") if body else None

    def create(self, article: dict) -> dict | None:
        body = self._call("POST", "/api/news", json=article)
        return body.get("data") if body else None

    def bulk_create(self, articles: list[dict]) -> dict | None:
        return self._call("POST", "/api/news/bulk", json={"articles": articles})

    def metadata(self) -> dict | None:
        body = self._call("GET", "/api/metadata")
        return body.get("data") if body else None

    def analytics(self) -> dict | None:
        body = self._call("GET", "/api/analytics")
        return body.get("data") if body else None

    def preferences(self) -> dict | None:
        body = self._call("GET", "/api/preferences")
        return body.get("preferences") if body else None

    def update_preferences(self, preferences: dict) -> dict | None:
        body = self._call("PUT", "/api/preferences", json=preferences)
        return body.get("preferences") if body else None
