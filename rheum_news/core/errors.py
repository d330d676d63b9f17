from __future__ import annotations

from typing import Any, List, Optional


class NewsApiError(Exception):
    pass


class ValidationFailed(NewsApiError):
    """Caller payload is missing required fields; never forwarded upstream."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamError(NewsApiError):
    """Airtable answered with an error status or could not be reached.

    ``status`` is None for transport failures. ``message`` is the upstream's own
    error message when one could be extracted from the response body.
    """

    def __init__(self, status: Optional[int], message: Optional[str] = None) -> None:
        super().__init__(message or f"Airtable request failed ({status})")
        self.status = status
        self.message = message


class NotFound(UpstreamError):
    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(404, message)


class BulkCreateError(UpstreamError):
    """A chunk failed mid-way through a bulk create.

    Chunks before ``chunks_committed`` are already stored upstream and are not
    rolled back; ``articles`` holds what they returned.
    """

    def __init__(
        self,
        cause: UpstreamError,
        *,
        chunks_committed: int,
        chunks_total: int,
        articles: List[Any],
    ) -> None:
        super().__init__(cause.status, cause.message)
        self.cause = cause
        self.chunks_committed = chunks_committed
        self.chunks_total = chunks_total
        self.articles = articles

    @property
    def created(self) -> int:
        return len(self.articles)
