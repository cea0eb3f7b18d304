"""
Pagecraft Kernel — Template Loader

Bridges the store and the persistence API. Fetches run concurrently with
editing; when one resolves, the store is written only if this request is
still the latest one issued and nothing else has replaced the document in
the meantime. Anything older is dropped.
"""

from __future__ import annotations

import logging
from typing import Any

from editor.client import PagesClient
from editor.kernel.store import DocumentStore

logger = logging.getLogger(__name__)


class TemplateLoader:
    def __init__(self, store: DocumentStore, client: PagesClient) -> None:
        self.store = store
        self.client = client
        self._ticket = 0

    def _issue(self) -> tuple[int, int]:
        self._ticket += 1
        return self._ticket, self.store.generation

    def _current(self, issued: tuple[int, int]) -> bool:
        ticket, generation = issued
        if ticket != self._ticket or generation != self.store.generation:
            logger.info("loader: discarding stale response (ticket %d, latest %d)", ticket, self._ticket)
            return False
        return True

    async def select_template(self, template_id: str) -> bool:
        """Fetch a catalog template and load it. Returns False if superseded."""
        issued = self._issue()
        payload = await self.client.fetch_template(template_id)
        if not self._current(issued):
            return False
        return self.store.load_template(payload)

    async def load_page(self, page_id: str) -> bool:
        """Fetch a saved page and hydrate the store from it."""
        issued = self._issue()
        page = await self.client.fetch_page(page_id)
        if not self._current(issued):
            return False
        self.store.hydrate_state(page)
        return True

    async def restore_latest(self) -> bool:
        """
        Startup path: hydrate from the most recently saved page, unless the
        user has already picked a template while the request was in flight.
        """
        issued = self._issue()
        pages = await self.client.fetch_pages()
        if not pages:
            logger.debug("loader: no saved pages")
            return False
        if not self._current(issued) or self.store.template_selected:
            return False
        self.store.hydrate_state(pages[0])
        return True

    async def save(self, page_id: str | None = None, name: str | None = None) -> dict[str, Any]:
        """Persist the current document. Does not take a ticket: saves never write the store."""
        page = self.store.to_project()
        if page_id is not None:
            page["id"] = page_id
        page["name"] = name or self.store.template.name  # type: ignore[union-attr]
        saved = await self.client.push_page(page)
        logger.info("loader: saved page %s", saved.get("id"))
        return saved
