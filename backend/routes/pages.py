"""Saved page routes — list, get, save, delete."""

from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from backend.config import settings
from backend.models.page import PageResponse, SavePageRequest
from backend.storage import PageStorage
from editor.kernel.errors import HydrationError
from editor.kernel.hydration import deserialize, hash_template, serialize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pages", tags=["pages"])


def get_storage(request: Request) -> PageStorage:
    """Storage chosen at startup by the app lifespan."""
    return request.app.state.storage


@router.get("", status_code=200)
async def list_pages(storage: PageStorage = Depends(get_storage)) -> list[PageResponse]:
    """List saved pages, most recently updated first."""
    pages = await storage.list(settings.PAGES_LIMIT)
    return [PageResponse.from_record(p) for p in pages]


@router.get("/{page_id}", status_code=200)
async def get_page(page_id: str, storage: PageStorage = Depends(get_storage)) -> PageResponse:
    """Get a single saved page by ID."""
    page = await storage.get(page_id)
    if page is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    return PageResponse.from_record(page)


@router.post("", status_code=200)
async def save_page(req: SavePageRequest, storage: PageStorage = Depends(get_storage)) -> PageResponse:
    """
    Create or overwrite a page.

    The template goes through the same hydration checks the editor applies
    on load, so nothing the editor would refuse can be stored. Every problem
    is reported at once:

        422 {"detail": {"message": "...", "errors": ["template.sections[1]: ...", ...]}}
    """
    try:
        template = deserialize(req.template)
    except HydrationError as e:
        logger.info("pages: rejected save with %d error(s)", len(e.errors))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Template failed validation.", "errors": e.errors},
        ) from e

    page_id = req.id or uuid4().hex
    record = {
        "id": page_id,
        "name": req.name,
        "template": serialize(template),
        "activeTool": req.active_tool,
        "templateSelected": req.template_selected,
        "deviceMode": req.device_mode,
        "templateHash": hash_template(template),
    }
    async with storage.locked(page_id):
        saved = await storage.put(record)
    logger.info("pages: saved %s (%s)", page_id, record["templateHash"])
    return PageResponse.from_record(saved)


@router.delete("/{page_id}", status_code=204)
async def delete_page(page_id: str, storage: PageStorage = Depends(get_storage)) -> Response:
    """Delete a saved page."""
    async with storage.locked(page_id):
        deleted = await storage.delete(page_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
