from contextlib import asynccontextmanager

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from rheum_news import config
from rheum_news.api import meta as meta_api
from rheum_news.api import news as news_api
from rheum_news.core.responses import fail
from rheum_news.db import airtable as airtable_db

# Basic logging configuration (can be overridden by server config)
logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("rheum_news")

AVAILABLE_ENDPOINTS = [
    "GET /api/health",
    "GET /api/news",
    "GET /api/news/:id",
    "POST /api/news/:id/save",
    "POST /api/news",
    "GET /api/news/saved",
    "GET /api/metadata",
    "GET /api/preferences",
    "PUT /api/preferences",
    "POST /api/news/bulk",
    "GET /api/analytics",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    await airtable_db.connect_airtable()
    logger.info(
        "Rheumatology News API ready",
        extra={"event": "startup", "table_id": config.AIRTABLE_TABLE_ID},
    )
    try:
        yield
    finally:
        await airtable_db.close_airtable()


app = FastAPI(
    title="Rheumatology News API",
    description="REST proxy over the Airtable news table.",
    version="1.0.0",
    lifespan=lifespan,
    root_path=config.ROOT_PATH,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(meta_api.router)
app.include_router(news_api.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods on known paths both land here
    if exc.status_code in (404, 405):
        return fail(404, "Route not found", availableEndpoints=AVAILABLE_ENDPOINTS)
    return fail(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return fail(400, "Invalid request", details=jsonable_encoder(exc.errors()))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"event": "unhandled_error", "path": request.url.path})
    return fail(500, "Internal server error")


def main():
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "rheum_news.main:app",
        host=config.HOST,
        port=config.PORT,
    )


if __name__ == "__main__":
    main()
