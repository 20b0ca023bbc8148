"""Synchronization state and per-pass results."""

from dataclasses import dataclass
from enum import Enum


class SyncState(str, Enum):
    """Application-wide connectivity/sync state."""

    OFFLINE = "offline"
    ONLINE_IDLE = "online_idle"
    ONLINE_SYNCING = "online_syncing"


@dataclass
class SyncPassResult:
    """Outcome of one drain pass over the pending-operation queue.

    A pass that ran is reported even when every operation failed;
    callers inspect ``failed`` or the remaining queue themselves.
    """

    attempted: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: bool = False
