from __future__ import annotations

from rheum_news.core.errors import BulkCreateError, NotFound, UpstreamError


def _seed_two(fake_airtable, record):
    fake_airtable.seed(
        record("rec1", Title="FDA Approves Upadacitinib", Source="FDA", Category="Drug Approval",
               **{"Relevance Score": 95, "Published Date": "2024-12-15"}),
        record("rec2", Title="Early Biologic Therapy", Source="PubMed", Category="Research",
               **{"Relevance Score": 87, "User Saved": True}),
    )


def test_list_news_returns_envelope(client, fake_airtable, record):
    _seed_two(fake_airtable, record)

    resp = client.get("/api/news", params={"source": "FDA", "limit": 2})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["timestamp"].endswith("Z")
    assert body["total"] == 2
    assert body["data"][0]["publishedDate"] == "2024-12-15"
    assert body["data"][0]["relevanceScore"] == 95
    assert body["filters"] == {"category": None, "source": "FDA", "priority": None, "search": None}
    assert body["pagination"] == {"limit": 2, "hasMore": True}
    assert fake_airtable.calls[0][1]["filter"] == "{Source} = 'FDA'"


def test_list_news_default_limit_is_50(client, fake_airtable):
    client.get("/api/news")
    assert fake_airtable.calls[0][1]["max_records"] == 50


def test_list_news_rejects_bad_limit(client, fake_airtable):
    resp = client.get("/api/news", params={"limit": 0})
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert fake_airtable.calls == []


def test_list_news_upstream_failure_uses_upstream_message(client, fake_airtable):
    fake_airtable.fail_all = UpstreamError(422, "The formula for filtering records is invalid")
    resp = client.get("/api/news", params={"search": "x"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "The formula for filtering records is invalid"


def test_list_news_upstream_failure_without_message_uses_fallback(client, fake_airtable):
    fake_airtable.fail_all = UpstreamError(None)
    resp = client.get("/api/news")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Failed to fetch articles", "timestamp": resp.json()["timestamp"]}


def test_saved_route_is_not_treated_as_an_id(client, fake_airtable, record):
    _seed_two(fake_airtable, record)
    resp = client.get("/api/news/saved")
    assert resp.status_code == 200
    assert fake_airtable.calls[0][0] == "list"
    assert fake_airtable.calls[0][1]["filter"] == "{User Saved} = TRUE()"


def test_get_article_404_and_200(client, fake_airtable, record):
    resp = client.get("/api/news/recMISSING")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Article not found"

    _seed_two(fake_airtable, record)
    resp2 = client.get("/api/news/rec1")
    assert resp2.status_code == 200
    assert resp2.json()["data"]["title"] == "FDA Approves Upadacitinib"


def test_create_without_title_is_400_and_skips_upstream(client, fake_airtable):
    resp = client.post("/api/news", json={"source": "FDA"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Title and source are required"
    assert fake_airtable.calls == []


def test_create_returns_201_with_defaults(client, fake_airtable):
    resp = client.post("/api/news", json={"title": "New ACR guideline", "source": "News Article"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Article created successfully"
    assert body["data"]["category"] == "General"
    assert body["data"]["priority"] == "Low"
    assert body["data"]["relevanceScore"] == 50
    assert body["data"]["saved"] is False


def test_toggle_save_message(client, fake_airtable, record):
    _seed_two(fake_airtable, record)

    resp = client.post("/api/news/rec1/save")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Article saved"
    assert resp.json()["saved"] is True

    resp2 = client.post("/api/news/rec2/save")
    assert resp2.json()["message"] == "Article unsaved"
    assert resp2.json()["data"]["saved"] is False


def test_toggle_save_missing_article(client, fake_airtable):
    resp = client.post("/api/news/recNOPE/save")
    assert resp.status_code == 404


def test_bulk_requires_articles_array(client, fake_airtable):
    for body in ({}, {"articles": "nope"}):
        resp = client.post("/api/news/bulk", json=body)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Articles array is required"
    assert fake_airtable.calls == []


def test_bulk_rejects_invalid_item_before_any_write(client, fake_airtable):
    articles = [{"title": f"A{i}", "source": "PubMed"} for i in range(11)] + [{"source": "FDA"}]
    resp = client.post("/api/news/bulk", json={"articles": articles})
    assert resp.status_code == 400
    assert "index 11" in resp.json()["error"]
    assert fake_airtable.calls == []


def test_bulk_create_23(client, fake_airtable):
    articles = [{"title": f"A{i}", "source": "PubMed"} for i in range(23)]
    resp = client.post("/api/news/bulk", json={"articles": articles})
    assert resp.status_code == 200
    body = resp.json()
    assert body["created"] == 23
    assert body["chunks"] == 3
    assert body["message"] == "Successfully created 23 articles"
    assert [a["title"] for a in body["data"]] == [f"A{i}" for i in range(23)]


def test_bulk_partial_failure_reports_progress(client, monkeypatch):
    async def fake_chunked_create(payloads):
        raise BulkCreateError(
            UpstreamError(429, "Rate limit exceeded"),
            chunks_committed=2,
            chunks_total=3,
            articles=[],
        )

    monkeypatch.setattr("rheum_news.api.news.svc.chunked_create", fake_chunked_create)

    resp = client.post("/api/news/bulk", json={"articles": [{"title": "A", "source": "B"}]})
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Rate limit exceeded"
    assert body["chunksCommitted"] == 2
    assert body["chunksTotal"] == 3
    assert body["created"] == 0


def test_get_article_upstream_error_is_500(client, monkeypatch):
    async def boom(article_id):
        raise UpstreamError(401, None)

    monkeypatch.setattr("rheum_news.api.news.svc.get_article", boom)
    resp = client.get("/api/news/rec1")
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to fetch article"


def test_not_found_from_service_maps_to_404(client, monkeypatch):
    async def missing(article_id):
        raise NotFound()

    monkeypatch.setattr("rheum_news.api.news.svc.get_article", missing)
    assert client.get("/api/news/rec1").status_code == 404
