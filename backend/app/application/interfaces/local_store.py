"""Abstract port for the local persistence store."""

from abc import ABC, abstractmethod
from typing import Any

from app.domain.entities import Collection, PendingOperation


class LocalStore(ABC):
    """Keyed local storage for cached entities and the pending-operation queue.

    Implemented in the infrastructure layer. All calls perform local I/O only.
    """

    @abstractmethod
    async def open(self) -> None:
        """Open the database, creating missing collections.

        Raises StorageUnavailableError when local storage cannot be used at all.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying database resources."""
        ...

    @abstractmethod
    async def put(self, collection: Collection, record: dict[str, Any]) -> None:
        """Insert or overwrite a record keyed by its ``id``."""
        ...

    @abstractmethod
    async def get(self, collection: Collection, record_id: str) -> dict[str, Any] | None:
        """Return the record or None when absent."""
        ...

    @abstractmethod
    async def get_all(self, collection: Collection) -> list[dict[str, Any]]:
        """Return every record in the collection in insertion order."""
        ...

    @abstractmethod
    async def remove(self, collection: Collection, record_id: str) -> None:
        """Delete a record by key. No-op if absent."""
        ...

    @abstractmethod
    async def enqueue(self, operation: PendingOperation) -> PendingOperation:
        """Append an operation with ``attempts = 0`` and a fresh timestamp."""
        ...

    @abstractmethod
    async def pending_operations(self) -> list[PendingOperation]:
        """Return queued operations in insertion order."""
        ...

    @abstractmethod
    async def update_operation(self, operation: PendingOperation) -> None:
        """Persist changed bookkeeping (attempt count) of a queued operation."""
        ...

    @abstractmethod
    async def remove_operation(self, operation_id: int) -> bool:
        """Delete a queued operation. Returns True if deleted, False if not found."""
        ...
