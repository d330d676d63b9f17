# rheum_news/models/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional, Union


# Values Airtable can hand back for a cell. Checkbox -> bool, number -> int/float,
# text/select/date -> str, multi-select/attachments -> list/dict.
FieldValue = Union[str, bool, int, float, List[Any], Dict[str, Any], None]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Raw Airtable record ---
# Only the Airtable client and the transformer look inside `fields`
class UpstreamRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    fields: Dict[str, FieldValue] = Field(default_factory=dict)
    created_time: str = Field(default="", alias="createdTime")


# --- Normalized article returned to clients ---
class Article(_CamelModel):
    id: str
    title: str = ""
    source: str = ""
    category: str = ""
    priority: str = ""
    summary: str = ""
    url: str = ""
    published_date: str = ""
    relevance_score: int = 0
    keywords: str = ""
    saved: bool = False
    created_date: str = ""


# --- Payload accepted by create and bulk create ---
# Everything optional at the type level; required-field checks happen in
# services.transform.validate_article_input so callers get a 400, not a 422.
class ArticleInput(_CamelModel):
    title: Optional[str] = None
    source: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    summary: Optional[str] = None
    url: Optional[str] = None
    published_date: Optional[str] = None
    relevance_score: Optional[int] = None
    keywords: Optional[str] = None
    saved: Optional[bool] = None


class ArticleMetadata(_CamelModel):
    categories: List[str] = []
    sources: List[str] = []
    priorities: List[str] = []
    total_articles: int = 0


class ArticleAnalytics(_CamelModel):
    total_articles: int = 0
    saved_articles: int = 0
    by_source: Dict[str, int] = {}
    by_category: Dict[str, int] = {}
    by_priority: Dict[str, int] = {}
    average_relevance_score: int = 0
