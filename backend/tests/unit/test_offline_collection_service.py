"""Unit tests for the OfflineCollectionService."""

import pytest

from app.application.services import OfflineCollectionService
from app.domain.entities import Collection, DataSource, OperationType
from app.domain.exceptions import EntityNotFoundError, RemoteUnreachableError
from app.infrastructure.connectivity import ManualConnectivity
from tests.fakes import FakeLocalStore, FakeRemoteApi


async def _server(method, endpoint, data):
    """Remote API that echoes writes with a server-assigned id."""
    if method == "GET":
        return [{"id": "p1", "name": "Ann"}, {"id": "p2", "name": "Bob"}]
    if method == "POST":
        return {**data, "id": "real_1"}
    if method == "PUT":
        return {**data, "id": endpoint.rsplit("/", 1)[-1], "version": 2}
    return None


async def _unreachable(method, endpoint, data):
    raise RemoteUnreachableError("connection refused")


def _service(
    store: FakeLocalStore,
    remote: FakeRemoteApi,
    online: bool = True,
) -> tuple[OfflineCollectionService, ManualConnectivity]:
    connectivity = ManualConnectivity(initially_online=online)
    service = OfflineCollectionService(Collection.PATIENTS, store, remote, connectivity)
    return service, connectivity


@pytest.mark.asyncio
async def test_fetch_all_online_caches_results():
    store = FakeLocalStore()
    service, _ = _service(store, FakeRemoteApi(_server))

    result = await service.fetch_all()

    assert result.source == DataSource.REMOTE
    assert [r["id"] for r in result.items] == ["p1", "p2"]
    assert await store.get(Collection.PATIENTS, "p2") == {"id": "p2", "name": "Bob"}


@pytest.mark.asyncio
async def test_fetch_all_offline_reads_local_cache():
    store = FakeLocalStore()
    await store.put(Collection.PATIENTS, {"id": "p9", "name": "Cached"})
    remote = FakeRemoteApi(_server)
    service, _ = _service(store, remote, online=False)

    result = await service.fetch_all()

    assert result.source == DataSource.LOCAL
    assert result.items == [{"id": "p9", "name": "Cached"}]
    assert remote.calls == []


@pytest.mark.asyncio
async def test_fetch_all_falls_back_to_cache_on_api_failure():
    store = FakeLocalStore()
    await store.put(Collection.PATIENTS, {"id": "p9", "name": "Cached"})
    service, _ = _service(store, FakeRemoteApi(_unreachable))

    result = await service.fetch_all()

    assert result.source == DataSource.LOCAL
    assert isinstance(result.error, RemoteUnreachableError)
    assert result.items == [{"id": "p9", "name": "Cached"}]


@pytest.mark.asyncio
async def test_create_online_stores_server_copy():
    store = FakeLocalStore()
    service, _ = _service(store, FakeRemoteApi(_server))

    created = await service.create({"name": "X"})

    assert created == {"name": "X", "id": "real_1"}
    assert await store.get(Collection.PATIENTS, "real_1") == created
    assert store.queue == {}


@pytest.mark.asyncio
async def test_create_offline_stores_temp_record_and_queues_post():
    store = FakeLocalStore()
    remote = FakeRemoteApi(_server)
    service, _ = _service(store, remote, online=False)

    created = await service.create({"name": "X"})

    assert created["id"].startswith("temp_")
    assert created["_pendingSync"] is True
    assert await store.get(Collection.PATIENTS, created["id"]) == created
    assert remote.calls == []

    [op] = store.queue.values()
    assert op.type == OperationType.CREATE
    assert op.store_name == "patients"
    assert op.method == "POST"
    assert op.endpoint == "/patients"
    assert op.data == {"name": "X"}
    assert op.attempts == 0


@pytest.mark.asyncio
async def test_update_unknown_record_raises():
    service, _ = _service(FakeLocalStore(), FakeRemoteApi(_server))

    with pytest.raises(EntityNotFoundError):
        await service.update("missing", {"name": "Y"})


@pytest.mark.asyncio
async def test_update_online_stores_server_result():
    store = FakeLocalStore()
    await store.put(Collection.PATIENTS, {"id": "p1", "name": "Ann"})
    remote = FakeRemoteApi(_server)
    service, _ = _service(store, remote)

    result = await service.update("p1", {"name": "Anne"})

    assert result == {"name": "Anne", "id": "p1", "version": 2}
    assert await store.get(Collection.PATIENTS, "p1") == result
    assert remote.calls[-1] == ("PUT", "/patients/p1", {"name": "Anne"})


@pytest.mark.asyncio
async def test_update_offline_merges_locally_and_queues_put():
    store = FakeLocalStore()
    await store.put(Collection.PATIENTS, {"id": "p1", "name": "Ann", "status": "active"})
    service, _ = _service(store, FakeRemoteApi(_server), online=False)

    result = await service.update("p1", {"name": "Anne"})

    assert result == {"id": "p1", "name": "Anne", "status": "active"}
    [op] = store.queue.values()
    assert op.type == OperationType.UPDATE
    assert (op.method, op.endpoint, op.data) == ("PUT", "/patients/p1", {"name": "Anne"})


@pytest.mark.asyncio
async def test_delete_online_removes_local_copy():
    store = FakeLocalStore()
    await store.put(Collection.PATIENTS, {"id": "p1"})
    remote = FakeRemoteApi(_server)
    service, _ = _service(store, remote)

    await service.delete("p1")

    assert await store.get(Collection.PATIENTS, "p1") is None
    assert remote.calls == [("DELETE", "/patients/p1", None)]


@pytest.mark.asyncio
async def test_delete_offline_marks_record_and_queues_delete():
    store = FakeLocalStore()
    await store.put(Collection.PATIENTS, {"id": "p1", "name": "Ann"})
    service, _ = _service(store, FakeRemoteApi(_server), online=False)

    await service.delete("p1")

    assert (await store.get(Collection.PATIENTS, "p1"))["_deleted"] is True
    [op] = store.queue.values()
    assert op.type == OperationType.DELETE
    assert (op.method, op.endpoint, op.data) == ("DELETE", "/patients/p1", {"id": "p1"})


@pytest.mark.asyncio
async def test_delete_offline_of_unknown_record_is_noop():
    store = FakeLocalStore()
    service, _ = _service(store, FakeRemoteApi(_server), online=False)

    await service.delete("missing")

    assert store.queue == {}
