from .sync import (
    ConnectivityUpdate,
    PendingOperationResponse,
    SyncPassResponse,
    SyncStatusResponse,
    SyncTriggerResponse,
)

__all__ = [
    "ConnectivityUpdate",
    "PendingOperationResponse",
    "SyncPassResponse",
    "SyncStatusResponse",
    "SyncTriggerResponse",
]
