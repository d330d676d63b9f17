from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ok(status_code: int = 200, **payload: Any) -> JSONResponse:
    body = {"success": True, **payload, "timestamp": utc_timestamp()}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body, by_alias=True))


def fail(status_code: int, error: str, **extra: Any) -> JSONResponse:
    body = {"success": False, "error": error, **extra, "timestamp": utc_timestamp()}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body, by_alias=True))
