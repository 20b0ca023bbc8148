"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.interfaces import ConnectivitySource
from app.application.services import SyncEngine
from app.config import get_settings
from app.infrastructure.connectivity import HttpConnectivityMonitor, ManualConnectivity
from app.infrastructure.database import ensure_sqlite_directory
from app.infrastructure.database.repositories import SQLAlchemyLocalStore
from app.infrastructure.health_records_api import HealthRecordsApiClient
from app.infrastructure.logging.log_config import setup_logging
from app.presentation.api.v1.router import router as v1_router

logger = logging.getLogger(__name__)


def _build_connectivity() -> ConnectivitySource:
    """Probe the configured URL when set; otherwise accept pushed state."""
    settings = get_settings()
    probe_url = settings.connectivity_probe_url.strip()
    if probe_url:
        return HttpConnectivityMonitor(
            probe_url=probe_url,
            interval=settings.connectivity_probe_interval,
            initially_online=settings.start_online,
        )
    logger.info("No CONNECTIVITY_PROBE_URL configured; connectivity is set via the API")
    return ManualConnectivity(initially_online=settings.start_online)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — open the local store, start connectivity and sync."""
    settings = get_settings()
    setup_logging()

    # 1. Open the local store (creates missing tables)
    ensure_sqlite_directory(settings.local_database_url)
    store = SQLAlchemyLocalStore(
        settings.local_database_url,
        echo=(settings.app_env == "development" and settings.log_level_sql == "DEBUG"),
    )
    await store.open()

    # 2. Remote API and connectivity
    remote = HealthRecordsApiClient(
        base_url=settings.api_base_url,
        api_token=settings.api_token,
        timeout=settings.sync_request_timeout,
    )
    connectivity = _build_connectivity()

    # 3. Sync engine, then the probe so the first transition is observed
    engine = SyncEngine(store=store, remote=remote, connectivity=connectivity)
    engine.start()
    if isinstance(connectivity, HttpConnectivityMonitor):
        await connectivity.start()
    app.state.sync_engine = engine

    yield

    # Shutdown
    if isinstance(connectivity, HttpConnectivityMonitor):
        await connectivity.stop()
    engine.stop()
    app.state.sync_engine = None
    await store.close()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="127.0.0.1",
        port=8020,
        reload=True,
    )
