"""
Pytest configuration and fixtures for Pagecraft backend tests.

ASGITransport does not run the app lifespan, so each test installs a fresh
MemoryStorage on app.state itself.
"""

from __future__ import annotations

import httpx
import pytest_asyncio

from backend.main import app
from backend.storage import MemoryStorage


@pytest_asyncio.fixture
async def storage():
    """Fresh in-memory page storage for one test."""
    storage = MemoryStorage()
    app.state.storage = storage
    yield storage
    app.state.storage = None


@pytest_asyncio.fixture
async def async_client(storage):
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
