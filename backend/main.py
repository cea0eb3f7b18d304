"""
Pagecraft FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.config import settings
from backend.routes import pages as pages_routes
from backend.routes import templates as templates_routes
from backend.storage import MemoryStorage, PageStorage, PostgresStorage

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def open_storage() -> PageStorage:
    """Postgres when DATABASE_URL is set, otherwise process memory."""
    if settings.use_memory_storage:
        logger.info("Using in-memory page storage")
        return MemoryStorage()
    storage = await PostgresStorage.connect(
        settings.DATABASE_URL,
        min_size=settings.DATABASE_POOL_MIN,
        max_size=settings.DATABASE_POOL_MAX,
    )
    logger.info("Postgres page storage initialized")
    return storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Opens page storage on startup unless one was installed already (tests
    put their own on app.state), and closes it on shutdown.
    """
    owned = getattr(app.state, "storage", None) is None
    if owned:
        app.state.storage = await open_storage()

    yield

    if owned:
        await app.state.storage.close()
        app.state.storage = None
        logger.info("Page storage closed")


app = FastAPI(
    title="Pagecraft",
    docs_url=None if settings.ENVIRONMENT == "production" else "/docs",
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(templates_routes.router)
app.include_router(pages_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
