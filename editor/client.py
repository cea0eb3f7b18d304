"""HTTP client for the Pagecraft persistence API."""

from __future__ import annotations

from typing import Any

import httpx

from editor.kernel.errors import NotFound


class PagesClient:
    """
    Talks to /api/templates and /api/pages.

    Blocking calls use an httpx.Client; the fetch_* coroutines use an
    httpx.AsyncClient created on first use. Pass `transport` to route both
    through something other than the network (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        api_url: str,
        token: str | None = None,
        transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.api_url = api_url.rstrip("/")
        self.token = token
        self._transport = transport
        self._timeout = timeout
        # MockTransport serves both clients; ASGITransport only the async one.
        sync_transport = transport if isinstance(transport, httpx.BaseTransport) else None
        self.client = httpx.Client(timeout=timeout, transport=sync_transport)
        self.async_client: httpx.AsyncClient | None = None

    def _headers(self) -> dict:
        """Build request headers."""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _async(self) -> httpx.AsyncClient:
        if self.async_client is None:
            transport = self._transport if isinstance(self._transport, httpx.AsyncBaseTransport) else None
            self.async_client = httpx.AsyncClient(timeout=self._timeout, transport=transport)
        return self.async_client

    @staticmethod
    def _unwrap(res: httpx.Response, what: str, key: object) -> Any:
        if res.status_code == 404:
            raise NotFound(what, key)
        res.raise_for_status()
        if res.status_code == 204:
            return None
        return res.json()

    # -- blocking --

    def list_templates(self) -> list[dict[str, Any]]:
        res = self.client.get(f"{self.api_url}/api/templates", headers=self._headers())
        return self._unwrap(res, "Templates", "/api/templates")

    def get_template(self, template_id: str) -> dict[str, Any]:
        res = self.client.get(f"{self.api_url}/api/templates/{template_id}", headers=self._headers())
        return self._unwrap(res, "Template", template_id)

    def list_pages(self) -> list[dict[str, Any]]:
        """Saved pages, most recent first."""
        res = self.client.get(f"{self.api_url}/api/pages", headers=self._headers())
        return self._unwrap(res, "Pages", "/api/pages")

    def get_page(self, page_id: str) -> dict[str, Any]:
        res = self.client.get(f"{self.api_url}/api/pages/{page_id}", headers=self._headers())
        return self._unwrap(res, "Page", page_id)

    def save_page(self, page: dict[str, Any]) -> dict[str, Any]:
        res = self.client.post(f"{self.api_url}/api/pages", json=page, headers=self._headers())
        return self._unwrap(res, "Page", page.get("id"))

    def delete_page(self, page_id: str) -> None:
        res = self.client.delete(f"{self.api_url}/api/pages/{page_id}", headers=self._headers())
        self._unwrap(res, "Page", page_id)

    # -- async --

    async def fetch_template(self, template_id: str) -> dict[str, Any]:
        res = await self._async().get(f"{self.api_url}/api/templates/{template_id}", headers=self._headers())
        return self._unwrap(res, "Template", template_id)

    async def fetch_pages(self) -> list[dict[str, Any]]:
        res = await self._async().get(f"{self.api_url}/api/pages", headers=self._headers())
        return self._unwrap(res, "Pages", "/api/pages")

    async def fetch_page(self, page_id: str) -> dict[str, Any]:
        res = await self._async().get(f"{self.api_url}/api/pages/{page_id}", headers=self._headers())
        return self._unwrap(res, "Page", page_id)

    async def push_page(self, page: dict[str, Any]) -> dict[str, Any]:
        res = await self._async().post(f"{self.api_url}/api/pages", json=page, headers=self._headers())
        return self._unwrap(res, "Page", page.get("id"))

    async def aclose(self) -> None:
        self.client.close()
        if self.async_client is not None:
            await self.async_client.aclose()
            self.async_client = None

    def close(self):
        """Close the blocking client. Use aclose() when the async client was used."""
        self.client.close()
