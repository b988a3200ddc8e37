from __future__ import annotations

import contextlib
import logging
import time

from fastapi import FastAPI, Request

from airtrack.api import api_router
from airtrack.config import settings
from airtrack.ingestors import ADSBIngestor
from airtrack.poller import build_poller
from airtrack.sectors import SectorCatalog, load_catalog
from airtrack.store import TrackingStore

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("airtrack")


def create_app(
    *,
    ingestor: ADSBIngestor | None = None,
    catalog: SectorCatalog | None = None,
    start_poller: bool | None = None,
) -> FastAPI:
    """Build the application; collaborators default to ones derived from settings."""

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application startup and shutdown lifecycle."""

        # ----- Startup logic -----
        app.state.store = TrackingStore()
        if catalog is not None:
            app.state.catalog = catalog
        elif settings.sector_catalog_path:
            app.state.catalog = load_catalog(settings.sector_catalog_path)
        else:
            app.state.catalog = SectorCatalog()
        logger.info("Sector catalog ready with %s sectors", len(app.state.catalog))

        app.state.poller = build_poller(app.state.store, ingestor=ingestor)
        enabled = settings.enable_poller if start_poller is None else start_poller
        if enabled:
            app.state.poller.start()
        else:
            logger.info("Poller disabled; refreshes run only on demand")

        try:
            # Yield control to application (request handling, tests, etc.)
            yield
        finally:
            # ----- Shutdown logic -----
            await app.state.poller.stop()

    app = FastAPI(title="AirTrack Overlay", lifespan=lifespan)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log basic request information for observability."""

        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "HTTP %s %s -> %s (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    app.include_router(api_router)

    @app.get("/", summary="Root")
    def read_root() -> dict[str, str]:
        """Basic root endpoint for quick verification."""

        return {"message": "AirTrack overlay is running"}

    return app


app = create_app()
