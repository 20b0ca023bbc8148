"""FastAPI dependency injection — exposes the objects wired in the lifespan."""

from fastapi import HTTPException, Request, status

from app.application.interfaces import ConnectivitySource, LocalStore
from app.application.services import SyncEngine


def get_sync_engine(request: Request) -> SyncEngine:
    """Provides the application-wide SyncEngine."""
    engine: SyncEngine | None = getattr(request.app.state, "sync_engine", None)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Sync engine is not running",
        )
    return engine


def get_local_store(request: Request) -> LocalStore:
    """Provides the local store the SyncEngine drains."""
    return get_sync_engine(request).store


def get_connectivity(request: Request) -> ConnectivitySource:
    return get_sync_engine(request).connectivity
