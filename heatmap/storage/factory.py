"""Heatmap Viewer — Storage backend selection."""

from typing import Optional

from heatmap.config import Settings
from heatmap.database import Database
from heatmap.storage.base import StorageBackend
from heatmap.storage.database_backend import DatabaseBackend
from heatmap.storage.local_backend import LocalBackend


def create_backend(settings: Settings, database: Optional[Database] = None) -> StorageBackend:
    """Build the backend named by ``settings.storage_backend``.

    The database backend needs an open Database; the local backend ignores it.
    """
    if settings.storage_backend == "database":
        if database is None:
            raise ValueError("storage_backend 'database' requires an open Database")
        return DatabaseBackend(database)
    if settings.storage_backend == "local":
        return LocalBackend(settings.local_storage_dir)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")
