from .field_encryption_service import FieldEncryptionService
from .offline_collection_service import OfflineCollectionService
from .sync_engine import SyncEngine

__all__ = [
    "FieldEncryptionService",
    "OfflineCollectionService",
    "SyncEngine",
]
