"""Heatmap Viewer — FastAPI Application Entry Point.

Upload hour × weekday performance reports and render them as heatmaps.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from heatmap.config import Settings, settings
from heatmap.database import Database, _mask_url, create_database
from heatmap.storage.factory import create_backend
from heatmap.storage.gateway import PersistenceGateway
from heatmap.services.file_service import FileService
from heatmap.api.file_routes import router as file_router
from heatmap.api.heatmap_routes import router as heatmap_router
from heatmap.core.logging import get_logger

logger = get_logger("main")

VERSION = "1.0.0"


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the application for a given configuration."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown lifecycle."""
        logger.info("🚀 Heatmap Viewer starting up...")
        logger.info(f"🗄️  Storage backend: {app_settings.storage_backend}")

        database: Database | None = None
        if app_settings.storage_backend == "database":
            database = create_database(app_settings).open()
            if database.test_connection():
                try:
                    database.init_db()
                except Exception as e:
                    logger.error(f"❌ Table creation failed: {e}")
            else:
                logger.error("❌ Database NOT connected — endpoints will fail")

        backend = create_backend(app_settings, database)
        gateway = PersistenceGateway.from_settings(backend, app_settings)
        app.state.settings = app_settings
        app.state.database = database
        app.state.gateway = gateway
        app.state.file_service = FileService(gateway)
        yield
        if database is not None:
            database.dispose()
        logger.info("Heatmap Viewer shut down")

    app = FastAPI(
        title="Heatmap Viewer",
        description="Upload hour-of-day × day-of-week conversion and cost reports and view them as color-coded heatmaps.",
        version=VERSION,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(file_router)
    app.include_router(heatmap_router)

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "heatmap-viewer",
            "version": VERSION,
        }

    @app.get("/debug/db", tags=["System"])
    async def debug_db():
        """Debug endpoint: check storage connectivity."""
        error = None
        connected = False
        try:
            connected = await app.state.gateway.check()
        except Exception as e:
            error = str(e)

        database = app.state.database
        return {
            "connected": connected,
            "storage": app_settings.storage_backend,
            "backend": database.backend_name if database else "local",
            "url": _mask_url(database.url) if database else app_settings.local_storage_dir,
            "error": error,
        }

    return app


app = create_app()
