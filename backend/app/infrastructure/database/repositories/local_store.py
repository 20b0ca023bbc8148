"""Concrete LocalStore implementation backed by SQLAlchemy and SQLite."""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.application.interfaces import LocalStore
from app.domain.entities import Collection, OperationType, PendingOperation
from app.domain.exceptions import (
    MissingRecordIdError,
    StorageReadError,
    StorageUnavailableError,
    StorageWriteError,
)
from app.infrastructure.database.base import Base
from app.infrastructure.database.models import COLLECTION_MODELS, PendingOperationModel
from app.infrastructure.database.session import create_local_engine, create_session_factory

logger = logging.getLogger(__name__)


class SQLAlchemyLocalStore(LocalStore):
    """Implements the LocalStore port with one table per collection.

    A short-lived session is opened for every call; nothing is held open
    between calls apart from the engine's connection pool.
    """

    def __init__(self, database_url: str, *, echo: bool = False):
        self._database_url = database_url
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    # ── Lifecycle ────────────────────────────────────────────────────

    async def open(self) -> None:
        if self._engine is None:
            try:
                self._engine = create_local_engine(self._database_url, echo=self._echo)
            except (ImportError, SQLAlchemyError) as exc:
                raise StorageUnavailableError(
                    f"Local database driver unavailable for '{self._database_url}': {exc}"
                ) from exc
            self._session_factory = create_session_factory(self._engine)

        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as exc:
            raise StorageUnavailableError(
                f"Could not open local database '{self._database_url}': {exc}"
            ) from exc
        logger.debug("Local store opened at %s", self._database_url)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def _session(self) -> AsyncSession:
        if self._session_factory is None:
            raise StorageUnavailableError("Local store has not been opened")
        return self._session_factory()

    # ── Entity collections ───────────────────────────────────────────

    async def put(self, collection: Collection, record: dict[str, Any]) -> None:
        record_id = record.get("id")
        if not record_id:
            raise MissingRecordIdError(collection.value)

        model_cls = COLLECTION_MODELS[collection]
        # Single upsert: an existing row keeps its seq, so insertion order holds
        stmt = sqlite_insert(model_cls).values(id=str(record_id), data=dict(record))
        stmt = stmt.on_conflict_do_update(
            index_elements=[model_cls.id],
            set_={
                "data": stmt.excluded.data,
                "updated_at": datetime.now(timezone.utc),
            },
        )
        try:
            async with self._session() as session:
                await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageWriteError(
                f"Failed to store data in {collection.value}: {exc}"
            ) from exc

    async def get(self, collection: Collection, record_id: str) -> dict[str, Any] | None:
        model_cls = COLLECTION_MODELS[collection]
        try:
            async with self._session() as session:
                result = await session.execute(
                    select(model_cls).where(model_cls.id == record_id)
                )
                model = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageReadError(
                f"Failed to retrieve data from {collection.value}: {exc}"
            ) from exc
        return dict(model.data) if model else None

    async def get_all(self, collection: Collection) -> list[dict[str, Any]]:
        model_cls = COLLECTION_MODELS[collection]
        try:
            async with self._session() as session:
                result = await session.execute(select(model_cls).order_by(model_cls.seq))
                return [dict(row.data) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise StorageReadError(
                f"Failed to retrieve all data from {collection.value}: {exc}"
            ) from exc

    async def remove(self, collection: Collection, record_id: str) -> None:
        model_cls = COLLECTION_MODELS[collection]
        try:
            async with self._session() as session:
                result = await session.execute(
                    select(model_cls).where(model_cls.id == record_id)
                )
                model = result.scalar_one_or_none()
                if model is None:
                    return
                await session.delete(model)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageWriteError(
                f"Failed to delete '{record_id}' from {collection.value}: {exc}"
            ) from exc

    # ── Pending-operation queue ──────────────────────────────────────

    def _to_operation(self, model: PendingOperationModel) -> PendingOperation:
        """Map ORM model → domain entity."""
        timestamp = model.timestamp
        if timestamp.tzinfo is None:
            # SQLite drops the offset; values are always written in UTC
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return PendingOperation(
            id=model.id,
            type=OperationType(model.type),
            store_name=model.store_name,
            data=dict(model.data),
            endpoint=model.endpoint,
            method=model.method,
            timestamp=timestamp,
            attempts=model.attempts,
        )

    async def enqueue(self, operation: PendingOperation) -> PendingOperation:
        model = PendingOperationModel(
            type=OperationType(operation.type).value,
            store_name=operation.store_name,
            data=dict(operation.data),
            endpoint=operation.endpoint,
            method=operation.method.upper(),
            timestamp=datetime.now(timezone.utc),
            attempts=0,
        )
        try:
            async with self._session() as session:
                session.add(model)
                await session.commit()
                return self._to_operation(model)
        except SQLAlchemyError as exc:
            raise StorageWriteError(f"Failed to queue operation: {exc}") from exc

    async def pending_operations(self) -> list[PendingOperation]:
        try:
            async with self._session() as session:
                result = await session.execute(
                    select(PendingOperationModel).order_by(PendingOperationModel.id)
                )
                return [self._to_operation(row) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise StorageReadError(f"Failed to read the sync queue: {exc}") from exc

    async def update_operation(self, operation: PendingOperation) -> None:
        if operation.id is None:
            raise StorageWriteError("Cannot update an operation that was never queued")
        try:
            async with self._session() as session:
                model = await session.get(PendingOperationModel, operation.id)
                if model is None:
                    raise StorageWriteError(
                        f"Queued operation {operation.id} no longer exists"
                    )
                model.attempts = operation.attempts
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageWriteError(
                f"Failed to update queued operation {operation.id}: {exc}"
            ) from exc

    async def remove_operation(self, operation_id: int) -> bool:
        try:
            async with self._session() as session:
                model = await session.get(PendingOperationModel, operation_id)
                if model is None:
                    return False
                await session.delete(model)
                await session.commit()
                return True
        except SQLAlchemyError as exc:
            raise StorageWriteError(
                f"Failed to remove queued operation {operation_id}: {exc}"
            ) from exc
