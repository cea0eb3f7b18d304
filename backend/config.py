"""
Pagecraft configuration — all environment variables in one place.

Read from environment at import. Every setting has a usable local default.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Database. Empty means pages live in process memory.
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "")
    DATABASE_POOL_MIN: int = int(os.environ.get("DATABASE_POOL_MIN", "1"))
    DATABASE_POOL_MAX: int = int(os.environ.get("DATABASE_POOL_MAX", "10"))

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    # Listing
    PAGES_LIMIT: int = int(os.environ.get("PAGES_LIMIT", "50"))

    @property
    def use_memory_storage(self) -> bool:
        return not self.DATABASE_URL


# Singleton instance
settings = Settings()
