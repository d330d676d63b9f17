from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

from rheum_news.core.errors import ValidationFailed
from rheum_news.models.schemas import Article, ArticleInput, FieldValue, UpstreamRecord


# Article attribute -> Airtable column. The only place column names live.
AIRTABLE_FIELDS: Dict[str, str] = {
    "title": "Title",
    "source": "Source",
    "category": "Category",
    "priority": "Priority",
    "summary": "Summary",
    "url": "Full URL",
    "published_date": "Published Date",
    "relevance_score": "Relevance Score",
    "keywords": "Keywords",
    "saved": "User Saved",
}

SAVED_FIELD = AIRTABLE_FIELDS["saved"]
PUBLISHED_DATE_FIELD = AIRTABLE_FIELDS["published_date"]

# Applied on creation only; reads fall back to the Article model defaults
CREATE_DEFAULTS = {
    "category": "General",
    "priority": "Low",
    "summary": "",
    "url": "",
    "relevance_score": 50,
    "keywords": "",
    "saved": False,
}


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _as_str(value: FieldValue) -> str:
    if value is None or isinstance(value, (bool, dict)):
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ", ".join(str(v) for v in value if v is not None)
    return str(value)


def _as_int(value: FieldValue, default: int = 0) -> int:
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(round(value))
    if isinstance(value, str):
        try:
            return int(round(float(value)))
        except ValueError:
            return default
    return default


def _as_bool(value: FieldValue) -> bool:
    return value is True


def to_article(record: UpstreamRecord) -> Article:
    """Map a raw Airtable record onto the fixed Article shape.

    Total: any missing, null or oddly typed cell becomes the field's default.
    """
    f = record.fields
    return Article(
        id=record.id,
        title=_as_str(f.get(AIRTABLE_FIELDS["title"])),
        source=_as_str(f.get(AIRTABLE_FIELDS["source"])),
        category=_as_str(f.get(AIRTABLE_FIELDS["category"])),
        priority=_as_str(f.get(AIRTABLE_FIELDS["priority"])),
        summary=_as_str(f.get(AIRTABLE_FIELDS["summary"])),
        url=_as_str(f.get(AIRTABLE_FIELDS["url"])),
        published_date=_as_str(f.get(AIRTABLE_FIELDS["published_date"])),
        relevance_score=_as_int(f.get(AIRTABLE_FIELDS["relevance_score"])),
        keywords=_as_str(f.get(AIRTABLE_FIELDS["keywords"])),
        saved=_as_bool(f.get(AIRTABLE_FIELDS["saved"])),
        created_date=record.created_time or "",
    )


def to_upstream_fields(payload: ArticleInput) -> Dict[str, FieldValue]:
    """Airtable ``fields`` for every attribute the caller explicitly set."""
    fields: Dict[str, FieldValue] = {}
    for name in AIRTABLE_FIELDS:
        if name not in payload.model_fields_set:
            continue
        value = getattr(payload, name)
        if value is None:
            continue
        fields[AIRTABLE_FIELDS[name]] = value
    return fields


def validate_article_input(payload: ArticleInput, index: Optional[int] = None) -> None:
    if payload.title and payload.source:
        return
    message = "Title and source are required"
    if index is not None:
        message = f"Article at index {index}: {message}"
    raise ValidationFailed(message)


def build_upstream_fields(payload: ArticleInput, *, keep_saved: bool = True) -> Dict[str, FieldValue]:
    """Fields for a new record: caller values over the creation defaults.

    Shared by single and bulk create. Bulk create passes ``keep_saved=False``
    so imported articles always start unsaved.
    """
    values = {
        name: getattr(payload, name)
        for name in AIRTABLE_FIELDS
        if getattr(payload, name) not in (None, "")
    }
    for name, default in CREATE_DEFAULTS.items():
        values.setdefault(name, default)
    values.setdefault("published_date", _today())
    if not keep_saved:
        values["saved"] = False
    return to_upstream_fields(ArticleInput(**values))
