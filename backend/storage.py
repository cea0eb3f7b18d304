"""
Page storage — where saved editor projects live.

A stored page is the JSON object the API returns:

    {"id", "name", "template", "activeTool", "templateSelected",
     "deviceMode", "templateHash", "updatedAt"}

MemoryStorage keeps pages in a dict for local runs and tests.
PostgresStorage keeps them in a `pages` table with the body as JSONB.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import asyncpg

logger = logging.getLogger(__name__)


class PageStorage:
    """
    Abstract storage interface.
    Writes to the same page id are serialized through a per-page lock.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def lock(self, page_id: str) -> asyncio.Lock:
        """Per-page asyncio lock for single-instance serialization."""
        if page_id not in self._locks:
            self._locks[page_id] = asyncio.Lock()
        return self._locks[page_id]

    @asynccontextmanager
    async def locked(self, page_id: str) -> AsyncIterator[None]:
        """Hold the page lock. The lock is dropped once no writer holds or waits on it."""
        self._lock_users[page_id] = self._lock_users.get(page_id, 0) + 1
        try:
            async with self.lock(page_id):
                yield
        finally:
            self._lock_users[page_id] -= 1
            if not self._lock_users[page_id]:
                del self._lock_users[page_id]
                self._locks.pop(page_id, None)

    async def list(self, limit: int) -> list[dict[str, Any]]:
        """Saved pages, most recently updated first."""
        raise NotImplementedError

    async def get(self, page_id: str) -> dict[str, Any] | None:
        """Fetch one page. Returns None if not found."""
        raise NotImplementedError

    async def put(self, page: dict[str, Any]) -> dict[str, Any]:
        """Create or overwrite by id. Stamps updatedAt and returns the stored page."""
        raise NotImplementedError

    async def delete(self, page_id: str) -> bool:
        """Remove a page. Returns False if it did not exist."""
        raise NotImplementedError

    async def close(self) -> None:
        pass


class MemoryStorage(PageStorage):
    """In-memory storage. Insertion order doubles as recency order."""

    def __init__(self) -> None:
        super().__init__()
        self.pages: dict[str, dict[str, Any]] = {}

    async def list(self, limit: int) -> list[dict[str, Any]]:
        return [_copy(p) for p in reversed(self.pages.values())][:limit]

    async def get(self, page_id: str) -> dict[str, Any] | None:
        page = self.pages.get(page_id)
        return _copy(page) if page is not None else None

    async def put(self, page: dict[str, Any]) -> dict[str, Any]:
        stored = {**_copy(page), "updatedAt": _now()}
        self.pages.pop(stored["id"], None)
        self.pages[stored["id"]] = stored
        return _copy(stored)

    async def delete(self, page_id: str) -> bool:
        return self.pages.pop(page_id, None) is not None


class PostgresStorage(PageStorage):
    """
    Postgres-based page storage.

    One table, created on first use:
      pages(id text primary key, name text, body jsonb, updated_at timestamptz)
    `body` holds everything except id/name/updatedAt.
    """

    def __init__(self, pool: asyncpg.Pool):
        super().__init__()
        self.pool = pool

    @classmethod
    async def connect(cls, dsn: str, min_size: int = 1, max_size: int = 10) -> PostgresStorage:
        pool = await asyncpg.create_pool(dsn=dsn, min_size=min_size, max_size=max_size, command_timeout=60)
        storage = cls(pool)
        await storage.ensure_schema()
        return storage

    async def ensure_schema(self) -> None:
        async with self.pool.acquire() as conn:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS pages (
                    id text PRIMARY KEY,
                    name text NOT NULL,
                    body jsonb NOT NULL,
                    updated_at timestamptz NOT NULL DEFAULT now()
                )
                """
            )

    async def list(self, limit: int) -> list[dict[str, Any]]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                "SELECT id, name, body, updated_at FROM pages ORDER BY updated_at DESC LIMIT $1",
                limit,
            )
            return [_from_row(r) for r in rows]

    async def get(self, page_id: str) -> dict[str, Any] | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT id, name, body, updated_at FROM pages WHERE id = $1",
                page_id,
            )
            return _from_row(row) if row else None

    async def put(self, page: dict[str, Any]) -> dict[str, Any]:
        body = {k: v for k, v in page.items() if k not in ("id", "name", "updatedAt")}
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO pages (id, name, body, updated_at)
                VALUES ($1, $2, $3::jsonb, now())
                ON CONFLICT (id)
                DO UPDATE SET name = EXCLUDED.name, body = EXCLUDED.body, updated_at = now()
                RETURNING id, name, body, updated_at
                """,
                page["id"],
                page["name"],
                json.dumps(body),
            )
            return _from_row(row)

    async def delete(self, page_id: str) -> bool:
        async with self.pool.acquire() as conn:
            result = await conn.execute("DELETE FROM pages WHERE id = $1", page_id)
            # asyncpg returns the command tag, e.g. "DELETE 1"
            return result.split()[-1] != "0"

    async def close(self) -> None:
        """Close the connection pool."""
        await self.pool.close()


def _from_row(row: asyncpg.Record) -> dict[str, Any]:
    body = row["body"]
    if isinstance(body, str):
        body = json.loads(body)
    return {
        "id": row["id"],
        "name": row["name"],
        **body,
        "updatedAt": row["updated_at"].isoformat(),
    }


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _copy(page: dict[str, Any]) -> dict[str, Any]:
    # JSON-shaped data only, so a JSON round-trip is a full deep copy.
    return json.loads(json.dumps(page))
