"""Landmarks — FastAPI application.

Serves the landmark list, detail, photos and per-landmark maps.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from landmarks.api.routers.landmarks import router as landmarks_router
from landmarks.config import Settings, settings as default_settings
from landmarks.dispatch import BackgroundDispatcher
from landmarks.errors import ResourceLoadError
from landmarks.resources import ResourceBundle
from landmarks.store import LandmarkStore

VERSION = "0.1.0"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for the given settings (defaults to env/.env)."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info("=" * 60)
        logger.info(f"  {settings.app_name.upper()} v{VERSION} - INITIALIZING")
        logger.info("=" * 60)

        bundle = ResourceBundle(settings.resources_dir)
        store = LandmarkStore(bundle)
        try:
            store.load_all()
        except ResourceLoadError as e:
            # Keep serving; list/detail endpoints report the error per request
            logger.error(f"Landmark store unavailable: {e}")

        if settings.maptiler_key:
            logger.info(f"Map tiles: {settings.tile_host} ({settings.map_style})")
        else:
            logger.warning("MAPTILER_KEY not set; map endpoints will return 503")

        app.state.settings = settings
        app.state.bundle = bundle
        app.state.store = store
        app.state.dispatcher = BackgroundDispatcher(max_workers=settings.geometry_workers)

        yield

        logger.info("Shutting down...")
        app.state.dispatcher.shutdown(wait=False)

    app = FastAPI(
        title=settings.app_name,
        version=VERSION,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(landmarks_router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "operational",
            "version": VERSION,
            "system": settings.app_name,
        }

    return app


app = create_app()
