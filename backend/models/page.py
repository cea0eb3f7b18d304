"""Page and template models for the persistence API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from editor.kernel.types import DEFAULT_DEVICE_MODE, DEFAULT_TOOL, DeviceMode, TemplateSummary, ToolId


class SavePageRequest(BaseModel):
    """What the client sends to POST /api/pages. Omitting `id` creates a new page."""

    model_config = {"extra": "forbid", "populate_by_name": True}

    id: str | None = Field(default=None, min_length=1, max_length=100, pattern=r"^[^/]+$")
    name: str = Field(min_length=1, max_length=200)
    template: dict[str, Any]
    active_tool: ToolId = Field(default=DEFAULT_TOOL, alias="activeTool")
    template_selected: bool = Field(default=True, alias="templateSelected")
    device_mode: DeviceMode = Field(default=DEFAULT_DEVICE_MODE, alias="deviceMode")


class PageResponse(BaseModel):
    """A stored page as the API returns it. Serialized with camelCase keys."""

    model_config = {"populate_by_name": True}

    id: str
    name: str
    template: dict[str, Any]
    active_tool: str = Field(alias="activeTool")
    template_selected: bool = Field(alias="templateSelected")
    device_mode: str = Field(default=DEFAULT_DEVICE_MODE, alias="deviceMode")
    template_hash: str = Field(alias="templateHash")
    updated_at: str = Field(alias="updatedAt")

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> PageResponse:
        """Convert a storage record to the public API response."""
        return cls.model_validate(record)


class TemplateSummaryResponse(BaseModel):
    """One catalog entry in GET /api/templates."""

    id: str
    name: str
    description: str | None = None
    thumbnail: str | None = None

    @classmethod
    def from_summary(cls, summary: TemplateSummary) -> TemplateSummaryResponse:
        return cls(
            id=str(summary.id),
            name=summary.name,
            description=summary.description,
            thumbnail=summary.thumbnail,
        )
