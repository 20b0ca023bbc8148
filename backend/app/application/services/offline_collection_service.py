"""Application service (use case) for offline-first access to one entity collection."""

import logging
import time
from typing import Any
from uuid import uuid4

from app.application.interfaces import ConnectivitySource, LocalStore, RemoteApi
from app.domain.entities import (
    Collection,
    DataSource,
    FetchResult,
    OperationType,
    PendingOperation,
)
from app.domain.exceptions import EntityNotFoundError, RemoteApiError

logger = logging.getLogger(__name__)


def _temporary_id() -> str:
    return f"temp_{int(time.time() * 1000)}_{uuid4().hex[:8]}"


class OfflineCollectionService:
    """Reads and writes one collection through the API when online and
    through the local store plus the sync queue when offline.

    Online results are cached locally so they stay readable offline.
    """

    def __init__(
        self,
        collection: Collection,
        store: LocalStore,
        remote: RemoteApi,
        connectivity: ConnectivitySource,
    ):
        self._collection = collection
        self._store = store
        self._remote = remote
        self._connectivity = connectivity

    @property
    def collection(self) -> Collection:
        return self._collection

    async def fetch_all(self) -> FetchResult:
        """Fetch every record, falling back to the local cache if the API fails."""
        if not self._connectivity.is_online():
            items = await self._store.get_all(self._collection)
            return FetchResult(items=items, source=DataSource.LOCAL)

        try:
            items = await self._remote.list_records(self._collection)
        except RemoteApiError as e:
            logger.warning(
                "Fetching %s from API failed, using local cache: %s",
                self._collection.value, e,
            )
            items = await self._store.get_all(self._collection)
            return FetchResult(items=items, source=DataSource.LOCAL, error=e)

        for item in items:
            await self._store.put(self._collection, item)
        return FetchResult(items=items, source=DataSource.REMOTE)

    async def create(self, item: dict[str, Any]) -> dict[str, Any]:
        """Create a record remotely, or locally with a temporary id when offline."""
        if self._connectivity.is_online():
            created = await self._remote.create_record(self._collection, item)
            await self._store.put(self._collection, created)
            return created

        temp_item = {**item, "id": _temporary_id(), "_pendingSync": True}
        await self._store.put(self._collection, temp_item)
        await self._store.enqueue(
            PendingOperation(
                type=OperationType.CREATE,
                store_name=self._collection.value,
                data=dict(item),
                endpoint=self._collection.resource_path,
                method="POST",
            )
        )
        logger.info("Queued offline create in %s as %s", self._collection.value, temp_item["id"])
        return temp_item

    async def update(self, record_id: str, updates: dict[str, Any]) -> dict[str, Any]:
        """Update a cached record remotely, or locally plus a queued PUT when offline."""
        current = await self._store.get(self._collection, record_id)
        if current is None:
            raise EntityNotFoundError(self._collection.value, record_id)

        if self._connectivity.is_online():
            result = await self._remote.update_record(self._collection, record_id, updates)
            await self._store.put(self._collection, result)
            return result

        updated = {**current, **updates, "id": record_id}
        await self._store.put(self._collection, updated)
        await self._store.enqueue(
            PendingOperation(
                type=OperationType.UPDATE,
                store_name=self._collection.value,
                data=dict(updates),
                endpoint=self._collection.item_path(record_id),
                method="PUT",
            )
        )
        logger.info("Queued offline update of %s/%s", self._collection.value, record_id)
        return updated

    async def delete(self, record_id: str) -> None:
        """Delete remotely, or mark the cached copy deleted and queue a DELETE."""
        if self._connectivity.is_online():
            await self._remote.delete_record(self._collection, record_id)
            await self._store.remove(self._collection, record_id)
            return

        current = await self._store.get(self._collection, record_id)
        if current is None:
            return

        await self._store.put(self._collection, {**current, "_deleted": True})
        await self._store.enqueue(
            PendingOperation(
                type=OperationType.DELETE,
                store_name=self._collection.value,
                data={"id": record_id},
                endpoint=self._collection.item_path(record_id),
                method="DELETE",
            )
        )
        logger.info("Queued offline delete of %s/%s", self._collection.value, record_id)
