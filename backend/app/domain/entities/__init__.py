from .collection import Collection, PENDING_SYNC
from .pending_operation import OperationType, PendingOperation
from .sync_state import SyncState, SyncPassResult
from .encryption_key import EncryptionKey, KEY_SIZE
from .fetch_result import DataSource, FetchResult

__all__ = [
    "Collection",
    "PENDING_SYNC",
    "OperationType",
    "PendingOperation",
    "SyncState",
    "SyncPassResult",
    "EncryptionKey",
    "KEY_SIZE",
    "DataSource",
    "FetchResult",
]
