"""Sync Engine — replays offline mutations once connectivity returns."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from app.application.interfaces import ConnectivitySource, LocalStore, RemoteApi
from app.domain.entities import PendingOperation, SyncPassResult, SyncState
from app.domain.exceptions import RemoteApiError, StorageError
from app.infrastructure.logging.sync_logger import SyncLogger, SyncStage

logger = logging.getLogger(__name__)
slog = SyncLogger("SyncEngine")


class SyncEngine:
    """Drains the pending-operation queue against the remote API.

    Operations are replayed one at a time in insertion order. A successful
    replay removes the operation; a failed one stays queued with its
    attempt counter incremented, and the pass moves on to the next entry.
    The engine never writes entity collections: re-storing the canonical
    server copy is left to the caller.
    """

    def __init__(
        self,
        store: LocalStore,
        remote: RemoteApi,
        connectivity: ConnectivitySource,
    ) -> None:
        self._store = store
        self._remote = remote
        self._connectivity = connectivity
        self._lock = asyncio.Lock()
        self._state = (
            SyncState.ONLINE_IDLE if connectivity.is_online() else SyncState.OFFLINE
        )
        self._last_sync_attempt: datetime | None = None
        self._last_result: SyncPassResult | None = None
        self._unsubscribe: Callable[[], None] | None = None

    # ── State ────────────────────────────────────────────────────────

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def sync_in_progress(self) -> bool:
        return self._state == SyncState.ONLINE_SYNCING

    @property
    def last_sync_attempt(self) -> datetime | None:
        return self._last_sync_attempt

    @property
    def last_result(self) -> SyncPassResult | None:
        return self._last_result

    @property
    def connectivity(self) -> ConnectivitySource:
        return self._connectivity

    @property
    def store(self) -> LocalStore:
        return self._store

    def is_online(self) -> bool:
        return self._connectivity.is_online()

    # ── Lifecycle ────────────────────────────────────────────────────

    def start(self) -> None:
        """Listen for connectivity transitions."""
        if self._unsubscribe is None:
            self._unsubscribe = self._connectivity.subscribe(
                self._handle_online, self._handle_offline
            )
            logger.info("SyncEngine started (state=%s)", self._state.value)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.info("SyncEngine stopped")

    async def _handle_online(self) -> None:
        slog.step_start(SyncStage.CONNECTIVITY, "Back online, draining sync queue")
        if self._state == SyncState.OFFLINE:
            self._state = SyncState.ONLINE_IDLE
        try:
            await self.drain_queue()
        except StorageError as e:
            slog.step_error(SyncStage.ERROR, "Could not read the sync queue", error=e)

    async def _handle_offline(self) -> None:
        # An in-flight drain keeps going; no new pass starts until back online
        self._state = SyncState.OFFLINE
        slog.step_start(SyncStage.CONNECTIVITY, "Gone offline, mutations will be queued")

    # ── Draining ─────────────────────────────────────────────────────

    async def trigger_sync(self) -> bool:
        """Run a drain pass on demand.

        Returns False without attempting anything when offline, or when the
        queue itself could not be read. True means a pass ran, not that
        every operation succeeded.
        """
        if not self.is_online():
            logger.info("Manual sync requested while offline, skipped")
            return False
        try:
            await self.drain_queue()
        except StorageError as e:
            slog.step_error(SyncStage.ERROR, "Manual sync failed", error=e)
            return False
        return True

    async def drain_queue(self) -> SyncPassResult:
        """Attempt every operation queued at the start of the pass, once.

        Operations enqueued while the pass is running wait for the next one.
        Per-operation failures are logged and recorded, never raised; only
        a failure to read the queue propagates (as StorageError).
        """
        if not self.is_online():
            logger.debug("drain_queue called while offline, skipped")
            return SyncPassResult(skipped=True)

        async with self._lock:
            # Connectivity may have dropped while waiting for a previous pass
            if not self.is_online():
                logger.debug("Went offline before the pass could start, skipped")
                return SyncPassResult(skipped=True)

            self._state = SyncState.ONLINE_SYNCING
            result = SyncPassResult()
            try:
                operations = await self._store.pending_operations()
                if operations:
                    slog.step_start(
                        SyncStage.QUEUE, f"Draining {len(operations)} queued operation(s)"
                    )

                for operation in operations:
                    result.attempted += 1
                    if await self._replay(operation):
                        result.succeeded += 1
                    else:
                        result.failed += 1
            finally:
                self._state = (
                    SyncState.ONLINE_IDLE if self.is_online() else SyncState.OFFLINE
                )
                self._last_sync_attempt = datetime.now(timezone.utc)
                self._last_result = result

        if result.attempted:
            slog.step_complete(SyncStage.COMPLETE, "Sync pass finished")
            slog.stats(
                attempted=result.attempted,
                succeeded=result.succeeded,
                failed=result.failed,
            )
        return result

    async def _replay(self, operation: PendingOperation) -> bool:
        """Replay one operation and update its queue bookkeeping."""
        try:
            await self._remote.send(operation.method, operation.endpoint, operation.data)
        except RemoteApiError as e:
            slog.step_failed(
                SyncStage.REPLAY,
                f"{operation.method} {operation.endpoint}",
                error=e,
                attempts=operation.attempts + 1,
            )
            operation.record_failure()
            try:
                await self._store.update_operation(operation)
            except StorageError as store_error:
                slog.step_error(
                    SyncStage.ERROR,
                    f"Could not record failed attempt for operation {operation.id}",
                    error=store_error,
                )
            return False

        try:
            await self._store.remove_operation(operation.id)
        except StorageError as e:
            # Replayed remotely but still queued; it will be sent again next pass
            slog.step_error(
                SyncStage.ERROR,
                f"Could not dequeue replayed operation {operation.id}",
                error=e,
            )
            return False

        slog.step_complete(
            SyncStage.REPLAY,
            f"{operation.method} {operation.endpoint}",
            type=operation.type.value,
        )
        return True
