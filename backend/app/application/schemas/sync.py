"""Pydantic DTOs for the sync status HTTP surface."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from app.domain.entities import OperationType, SyncState


class SyncPassResponse(BaseModel):
    """Counts from one drain pass."""

    attempted: int
    succeeded: int
    failed: int
    skipped: bool

    model_config = {"from_attributes": True}


class SyncStatusResponse(BaseModel):
    online: bool
    state: SyncState
    sync_in_progress: bool
    last_sync_attempt: datetime | None
    pending_operations: int
    last_result: SyncPassResponse | None = None


class SyncTriggerResponse(BaseModel):
    """Whether a pass ran, plus its counts when it did."""

    started: bool
    result: SyncPassResponse | None = None


class PendingOperationResponse(BaseModel):
    """A queued offline mutation."""

    id: int
    type: OperationType
    store_name: str
    data: dict[str, Any]
    endpoint: str
    method: str
    timestamp: datetime
    attempts: int

    model_config = {"from_attributes": True}


class ConnectivityUpdate(BaseModel):
    """Pushed connectivity state (manual connectivity source only)."""

    online: bool
