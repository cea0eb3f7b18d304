"""
Pydantic models for Pagecraft.

All data shapes defined here. No imports from storage or routes.
"""

from backend.models.page import PageResponse, SavePageRequest, TemplateSummaryResponse

__all__ = [
    # Page models
    "SavePageRequest",
    "PageResponse",
    # Catalog models
    "TemplateSummaryResponse",
]
