"""Template catalog routes — read-only."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, status

from backend.models.page import TemplateSummaryResponse
from editor.kernel.catalog import default_catalog
from editor.kernel.errors import NotFound

router = APIRouter(prefix="/api/templates", tags=["templates"])


@router.get("", status_code=200)
async def list_templates() -> list[TemplateSummaryResponse]:
    """Catalog summaries, in catalog order."""
    return [TemplateSummaryResponse.from_summary(s) for s in default_catalog.list()]


@router.get("/{template_id}", status_code=200)
async def get_template(template_id: str) -> dict[str, Any]:
    """One serialized catalog template."""
    try:
        return default_catalog.payload(template_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found.") from e
