"""Sync queue and connectivity endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.application.interfaces import ConnectivitySource, LocalStore
from app.application.schemas import (
    ConnectivityUpdate,
    PendingOperationResponse,
    SyncPassResponse,
    SyncStatusResponse,
    SyncTriggerResponse,
)
from app.application.services import SyncEngine
from app.domain.exceptions import StorageError
from app.infrastructure.connectivity import ManualConnectivity
from app.infrastructure.dependencies import (
    get_connectivity,
    get_local_store,
    get_sync_engine,
)

router = APIRouter(prefix="/sync", tags=["Sync"])


def _pass_response(engine: SyncEngine) -> SyncPassResponse | None:
    if engine.last_result is None:
        return None
    return SyncPassResponse.model_validate(engine.last_result, from_attributes=True)


@router.get("/status", response_model=SyncStatusResponse)
async def get_status(
    engine: SyncEngine = Depends(get_sync_engine),
    store: LocalStore = Depends(get_local_store),
) -> SyncStatusResponse:
    """Current connectivity, sync state, and queue length."""
    try:
        pending = await store.pending_operations()
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return SyncStatusResponse(
        online=engine.is_online(),
        state=engine.state,
        sync_in_progress=engine.sync_in_progress,
        last_sync_attempt=engine.last_sync_attempt,
        pending_operations=len(pending),
        last_result=_pass_response(engine),
    )


@router.post("/trigger", response_model=SyncTriggerResponse)
async def trigger_sync(
    engine: SyncEngine = Depends(get_sync_engine),
) -> SyncTriggerResponse:
    """Run a drain pass now. ``started`` is false when offline."""
    started = await engine.trigger_sync()
    return SyncTriggerResponse(
        started=started,
        result=_pass_response(engine) if started else None,
    )


@router.get("/pending", response_model=list[PendingOperationResponse])
async def list_pending(
    store: LocalStore = Depends(get_local_store),
) -> list[PendingOperationResponse]:
    """Queued operations in replay order."""
    try:
        operations = await store.pending_operations()
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return [
        PendingOperationResponse.model_validate(op, from_attributes=True)
        for op in operations
    ]


@router.delete("/pending/{operation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def clear_pending(
    operation_id: int,
    store: LocalStore = Depends(get_local_store),
) -> None:
    """Manually drop a queued operation."""
    try:
        deleted = await store.remove_operation(operation_id)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Pending operation {operation_id} not found",
        )


@router.put("/connectivity", response_model=SyncStatusResponse)
async def set_connectivity(
    data: ConnectivityUpdate,
    connectivity: ConnectivitySource = Depends(get_connectivity),
    engine: SyncEngine = Depends(get_sync_engine),
    store: LocalStore = Depends(get_local_store),
) -> SyncStatusResponse:
    """Push a connectivity change; going online drains the queue."""
    if not isinstance(connectivity, ManualConnectivity):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Connectivity is detected automatically and cannot be set",
        )
    if data.online:
        await connectivity.set_online()
    else:
        await connectivity.set_offline()
    return await get_status(engine=engine, store=store)
