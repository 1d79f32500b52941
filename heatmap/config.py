"""Heatmap Viewer — Central Configuration via Pydantic Settings."""

import os
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Storage ──
    storage_backend: Literal["database", "local"] = "database"
    database_url: str = ""
    local_storage_dir: str = ".local-storage"

    # ── Connection pool ──
    pool_size: int = 20
    pool_timeout: float = 10.0  # seconds to wait for a free connection
    pool_recycle: int = 30  # seconds before a pooled connection is replaced
    statement_timeout_ms: int = 5000

    # ── Retry policy ──
    retry_max_attempts: int = 3
    retry_base_delay_ms: int = 1000
    operation_timeout_seconds: float = 5.0

    # ── App ──
    log_level: str = "INFO"

    @property
    def effective_database_url(self) -> str:
        """Return the configured database URL, otherwise fall back to SQLite."""
        if self.database_url:
            return self.database_url
        # Vercel has a read-only filesystem; use /tmp for SQLite
        if os.environ.get("VERCEL"):
            return "sqlite:////tmp/heatmap.db"
        return "sqlite:///./heatmap.db"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
