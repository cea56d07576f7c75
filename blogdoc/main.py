"""
blogdoc API

Thin FastAPI backend serving parsed blog posts from a content directory.
"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blogdoc.config import get_settings
from blogdoc.errors import PostParseError
from blogdoc.middleware import (
    RequestIDLogFilter,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from blogdoc.routers import posts
from blogdoc.services.post_store import check_content_dir

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"

settings = get_settings()

logger = logging.getLogger(__name__)

# Health check cache: (result_dict, timestamp)
_health_cache: tuple[dict[str, Any], float] | None = None
_HEALTH_CACHE_TTL = 30  # seconds


def configure_logging(level: str) -> None:
    """Set up root logging with the request ID on every record."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIDLogFilter) for f in handler.filters):
            handler.addFilter(RequestIDLogFilter())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    configure_logging(get_settings().log_level)
    logger.info("Serving posts from %s", get_settings().content_dir)
    yield


app = FastAPI(
    title="blogdoc API",
    description="Parsed front matter and content blocks for Markdown blog posts",
    version="0.1.0",
    lifespan=lifespan,
)

# Request ID and security headers
app.add_middleware(RequestIDMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(posts.router, prefix="/api/blogdoc")


@app.exception_handler(PostParseError)
async def post_parse_error_handler(request: Request, exc: PostParseError) -> JSONResponse:
    """Report a document parse failure as 422 with its error type and line."""
    logger.info("Rejected document %s: %s", exc.source, exc)
    return JSONResponse(
        status_code=422,
        content={
            "error": type(exc).__name__,
            "detail": exc.message,
            "line": exc.line,
        },
    )


def _check_config() -> str:
    """Verify required configuration is loaded. Returns 'ok' or 'fail'."""
    s = get_settings()
    if s.content_dir and s.post_glob:
        return "ok"
    return "fail"


def _run_health_checks() -> dict[str, Any]:
    """Run all health checks, returning the full response body."""
    global _health_cache
    now = time.time()
    if _health_cache is not None:
        cached_result, cached_at = _health_cache
        if now - cached_at < _HEALTH_CACHE_TTL:
            return cached_result

    config_status = _check_config()
    content_status = "ok" if check_content_dir() else "fail"

    checks = {"config": config_status, "content": content_status}
    failed = [k for k, v in checks.items() if v != "ok"]

    if failed:
        overall = "degraded"
        logger.warning("Health check degraded, failed: %s", ", ".join(failed))
    else:
        overall = "ok"

    result: dict[str, Any] = {
        "status": overall,
        "service": "blogdoc-api",
        "version": "0.1.0",
        "checks": checks,
    }
    _health_cache = (result, now)
    return result


@app.get("/api/blogdoc/health")
async def health_check() -> JSONResponse:
    """Health check verifying configuration and the content directory."""
    result = _run_health_checks()
    return JSONResponse(content=result, status_code=200)
