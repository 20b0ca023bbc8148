"""Health check endpoint — always available, even before the sync engine runs."""

from fastapi import APIRouter, Request

from app.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Returns service health plus the connectivity seen by the sync engine."""
    settings = get_settings()
    engine = getattr(request.app.state, "sync_engine", None)
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "sync_engine": engine.state.value if engine is not None else "stopped",
    }
