# rheum_news/db/airtable.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx

from rheum_news import config
from rheum_news.core.errors import NotFound, UpstreamError
from rheum_news.models.schemas import FieldValue, UpstreamRecord

logger = logging.getLogger("rheum_news.airtable")

# Airtable rejects create/update calls carrying more than 10 records
MAX_RECORDS_PER_WRITE = 10

Sort = Sequence[Dict[str, str]]


def _error_message(resp: httpx.Response) -> Optional[str]:
    # Airtable errors look like {"error": {"type": ..., "message": ...}} or {"error": "NOT_FOUND"}
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    err = data.get("error")
    if isinstance(err, dict):
        msg = err.get("message")
        return msg if isinstance(msg, str) else None
    return None


def _sort_params(sort: Optional[Sort]) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for i, item in enumerate(sort or []):
        params[f"sort[{i}][field]"] = item["field"]
        params[f"sort[{i}][direction]"] = item.get("direction", "asc")
    return params


class AirtableClient:
    """Async client for one Airtable table.

    No retries and, unless a timeout is passed, no client-side timeout: upstream
    slowness and failures surface directly to the caller.
    """

    def __init__(
        self,
        base_id: str | None,
        table_id: str | None,
        access_token: str | None,
        *,
        api_url: str = "https://api.airtable.com/v0",
        timeout: float | None = None,
    ) -> None:
        self.base_id = base_id
        self.table_id = table_id
        self._client = httpx.AsyncClient(
            base_url=f"{api_url.rstrip('/')}/{base_id}",
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _path(self, record_id: str | None = None) -> str:
        path = f"/{self.table_id}"
        if record_id is not None:
            path += "/" + quote(record_id, safe="")
        return path

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict | None = None,
        json: dict | None = None,
    ) -> Dict[str, Any]:
        try:
            resp = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.error(
                "Airtable request failed",
                extra={"event": "airtable_transport_error", "method": method, "path": path},
            )
            raise UpstreamError(None, str(exc) or exc.__class__.__name__) from exc
        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning(
                "Airtable returned %s for %s %s: %s",
                resp.status_code,
                method,
                path,
                message,
                extra={"event": "airtable_error_status", "status": resp.status_code},
            )
            if resp.status_code == 404:
                raise NotFound(message)
            raise UpstreamError(resp.status_code, message)
        return resp.json()

    # --- Reads ---
    async def list_records(
        self,
        *,
        max_records: int | None = None,
        sort: Optional[Sort] = None,
        filter_by_formula: str | None = None,
    ) -> List[UpstreamRecord]:
        """List records, following Airtable's ``offset`` cursor across pages."""
        base_params: Dict[str, Any] = _sort_params(sort)
        if max_records is not None:
            base_params["maxRecords"] = max_records
        if filter_by_formula:
            base_params["filterByFormula"] = filter_by_formula

        records: List[UpstreamRecord] = []
        offset: str | None = None
        while True:
            params = dict(base_params)
            if offset:
                params["offset"] = offset
            data = await self._request("GET", self._path(), params=params)
            records.extend(UpstreamRecord.model_validate(r) for r in data.get("records", []))
            offset = data.get("offset")
            if not offset or (max_records is not None and len(records) >= max_records):
                break
        return records

    async def get_record(self, record_id: str) -> UpstreamRecord:
        data = await self._request("GET", self._path(record_id))
        return UpstreamRecord.model_validate(data)

    # --- Writes ---
    async def update_record(self, record_id: str, fields: Dict[str, FieldValue]) -> UpstreamRecord:
        data = await self._request(
            "PATCH",
            self._path(),
            json={"records": [{"id": record_id, "fields": fields}]},
        )
        return UpstreamRecord.model_validate(data["records"][0])

    async def create_records(self, fields_list: Sequence[Dict[str, FieldValue]]) -> List[UpstreamRecord]:
        if len(fields_list) > MAX_RECORDS_PER_WRITE:
            raise ValueError(f"Airtable accepts at most {MAX_RECORDS_PER_WRITE} records per create call")
        data = await self._request(
            "POST",
            self._path(),
            json={"records": [{"fields": f} for f in fields_list]},
        )
        return [UpstreamRecord.model_validate(r) for r in data.get("records", [])]


_client: Optional[AirtableClient] = None


async def connect_airtable() -> None:
    global _client
    if _client is None:
        if not (config.AIRTABLE_BASE_ID and config.AIRTABLE_TABLE_ID and config.AIRTABLE_ACCESS_TOKEN):
            logger.warning(
                "Airtable credentials are incomplete; upstream calls will fail",
                extra={"event": "airtable_config_incomplete"},
            )
        _client = AirtableClient(
            config.AIRTABLE_BASE_ID,
            config.AIRTABLE_TABLE_ID,
            config.AIRTABLE_ACCESS_TOKEN,
            api_url=config.AIRTABLE_API_URL,
            timeout=config.AIRTABLE_TIMEOUT,
        )


async def close_airtable() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def airtable() -> AirtableClient:
    if _client is None:
        raise RuntimeError("Airtable client is not initialized. Call connect_airtable() first.")
    return _client
