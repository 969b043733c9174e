"""
Blog Publisher API

Thin FastAPI backend that turns submitted markdown into static blog pages.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import get_settings
from api.middleware import (
    RequestIDLogFilter,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from api.models.blog import ErrorResponse
from api.routers import blog
from api.services.errors import PublishError
from api.services.http_client import close_shared_client

settings = get_settings()

_log_handler = logging.StreamHandler()
_log_handler.setFormatter(
    logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(request_id)s]: %(message)s")
)
_log_handler.addFilter(RequestIDLogFilter())
logging.basicConfig(level=settings.log_level.upper(), handlers=[_log_handler])
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    logger.info(
        "Blog publisher serving %s (publish %s)",
        settings.site_root,
        "on" if settings.publish_enabled else "off",
    )
    yield
    await close_shared_client()


app = FastAPI(
    title="Blog Publisher API",
    description="Publishes markdown posts as static pages with index and sitemap",
    version="0.1.0",
    lifespan=lifespan,
)

# Request ID (runs first — outermost middleware)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
)

# Routers
app.include_router(blog.router)


@app.exception_handler(PublishError)
async def publish_error_handler(request: Request, exc: PublishError) -> JSONResponse:
    """Map publish failures to their status code and an error payload."""
    if exc.status_code >= 500:
        logger.error("Publish failed: %s (%s)", exc.message, exc.kind)
    else:
        logger.info("Publish rejected: %s (%s)", exc.message, exc.kind)
    body = ErrorResponse(error=exc.message, kind=exc.kind)
    return JSONResponse(content=body.model_dump(), status_code=exc.status_code)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}
