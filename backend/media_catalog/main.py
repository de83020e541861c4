"""
Media Catalog API — FastAPI application entry point.

Routers are registered here. Each service lives in media_catalog/api/.
"""
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from media_catalog.api import media
from media_catalog.api import reviews as reviews_api
from media_catalog.core.config import settings
from media_catalog.core.errors import register_exception_handlers

logger = logging.getLogger("media_catalog.requests")

app = FastAPI(
    title="Media Catalog API",
    description="Movies and shows with nested reviews, stored in a JSON file.",
    version="1.0.0",
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_DOCS else None,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request log ───────────────────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            status_code,
            (time.perf_counter() - started) * 1000,
        )


# ── Errors ────────────────────────────────────────────────────────────────────
register_exception_handlers(app)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(media.router,       prefix="/media", tags=["media"])
app.include_router(reviews_api.router, prefix="/media", tags=["reviews"])


# ── Health check ──────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
def health_check() -> dict:
    """Liveness probe. Returns 200 when the server is up."""
    return {"status": "ok", "version": app.version, "env": settings.APP_ENV}


# ── Static files ──────────────────────────────────────────────────────────────
# Mounted last so API routes always win.
if settings.PUBLIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=settings.PUBLIC_DIR, html=True), name="public")
