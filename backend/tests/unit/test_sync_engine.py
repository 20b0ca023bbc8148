"""Unit tests for the SyncEngine."""

import asyncio
import json

import httpx
import pytest

from app.application.services import SyncEngine
from app.domain.entities import Collection, OperationType, PendingOperation, SyncState
from app.domain.exceptions import ApiRequestError
from app.infrastructure.connectivity import ManualConnectivity
from app.infrastructure.health_records_api import HealthRecordsApiClient
from tests.fakes import FakeLocalStore, FakeRemoteApi


# ── Helpers ──


def _operation(endpoint: str, data: dict, method: str = "POST") -> PendingOperation:
    return PendingOperation(
        type=OperationType.CREATE,
        store_name=Collection.PATIENTS.value,
        data=data,
        endpoint=endpoint,
        method=method,
    )


def _recording_client(
    requests: list[httpx.Request],
    fail_paths: set[str] = frozenset(),
    response_json: dict | None = None,
) -> HealthRecordsApiClient:
    """API client over a mock transport that records requests and fails chosen paths."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.path in fail_paths:
            return httpx.Response(500, json={"error": "Internal server error"})
        return httpx.Response(200, json=response_json or {"ok": True})

    return HealthRecordsApiClient(
        base_url="http://api.test/api",
        api_token="token-123",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


# ── Tests ──


@pytest.mark.asyncio
async def test_drain_replays_all_operations_in_order_and_empties_queue():
    store = FakeLocalStore()
    for i in range(4):
        await store.enqueue(_operation(f"/patients/p{i}", {"n": i}, method="PUT"))

    requests: list[httpx.Request] = []
    engine = SyncEngine(store, _recording_client(requests), ManualConnectivity())

    result = await engine.drain_queue()

    assert result.attempted == 4
    assert result.succeeded == 4
    assert result.failed == 0
    assert store.queue == {}
    assert [r.url.path for r in requests] == [f"/api/patients/p{i}" for i in range(4)]
    assert all(r.method == "PUT" for r in requests)
    assert requests[0].headers["Authorization"] == "Bearer token-123"


@pytest.mark.asyncio
async def test_failed_operation_stays_queued_and_others_proceed():
    store = FakeLocalStore()
    first = await store.enqueue(_operation("/patients", {"name": "A"}))
    second = await store.enqueue(_operation("/prescriptions", {"name": "B"}))
    third = await store.enqueue(_operation("/medical-records", {"name": "C"}))

    requests: list[httpx.Request] = []
    client = _recording_client(requests, fail_paths={"/api/prescriptions"})
    engine = SyncEngine(store, client, ManualConnectivity())

    result = await engine.drain_queue()

    assert result.succeeded == 2
    assert result.failed == 1
    assert len(requests) == 3
    assert first.id not in store.queue
    assert third.id not in store.queue
    assert store.queue[second.id].attempts == 1


@pytest.mark.asyncio
async def test_attempts_accumulate_across_passes():
    store = FakeLocalStore()
    op = await store.enqueue(_operation("/patients", {"name": "A"}))

    async def always_fail(method, endpoint, data):
        raise ApiRequestError(503, "Service unavailable")

    engine = SyncEngine(store, FakeRemoteApi(always_fail), ManualConnectivity())
    await engine.drain_queue()
    await engine.drain_queue()
    await engine.drain_queue()

    assert store.queue[op.id].attempts == 3


@pytest.mark.asyncio
async def test_network_error_counts_as_failed_attempt():
    store = FakeLocalStore()
    op = await store.enqueue(_operation("/patients", {"name": "A"}))

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HealthRecordsApiClient(
        base_url="http://api.test/api",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    engine = SyncEngine(store, client, ManualConnectivity())

    result = await engine.drain_queue()

    assert result.failed == 1
    assert store.queue[op.id].attempts == 1


@pytest.mark.asyncio
async def test_operations_enqueued_during_drain_wait_for_next_pass():
    store = FakeLocalStore()
    await store.enqueue(_operation("/patients", {"name": "A"}))

    async def enqueue_more(method, endpoint, data):
        if data == {"name": "A"}:
            await store.enqueue(_operation("/patients", {"name": "late"}))
        return {}

    remote = FakeRemoteApi(enqueue_more)
    engine = SyncEngine(store, remote, ManualConnectivity())

    first = await engine.drain_queue()
    assert first.attempted == 1
    assert len(store.queue) == 1

    second = await engine.drain_queue()
    assert second.attempted == 1
    assert store.queue == {}


@pytest.mark.asyncio
async def test_offline_create_is_replayed_when_connectivity_returns():
    store = FakeLocalStore()
    connectivity = ManualConnectivity(initially_online=False)

    requests: list[httpx.Request] = []
    client = _recording_client(requests, response_json={"id": "real_1", "name": "X"})
    engine = SyncEngine(store, client, connectivity)
    engine.start()
    assert engine.state == SyncState.OFFLINE

    await store.put(Collection.PATIENTS, {"id": "temp_1", "name": "X"})
    await store.enqueue(
        PendingOperation(
            type=OperationType.CREATE,
            store_name=Collection.PATIENTS.value,
            data={"name": "X"},
            endpoint="/patients",
            method="POST",
        )
    )

    await connectivity.set_online()

    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/api/patients"
    assert json.loads(requests[0].content) == {"name": "X"}
    assert store.queue == {}
    # Replacing the temporary record is left to the caller
    assert await store.get(Collection.PATIENTS, "temp_1") == {"id": "temp_1", "name": "X"}
    assert engine.state == SyncState.ONLINE_IDLE
    assert engine.last_sync_attempt is not None


@pytest.mark.asyncio
async def test_state_is_syncing_during_drain():
    store = FakeLocalStore()
    await store.enqueue(_operation("/patients", {"name": "A"}))
    seen_states: list[SyncState] = []
    engine: SyncEngine | None = None

    async def capture_state(method, endpoint, data):
        seen_states.append(engine.state)
        return {}

    engine = SyncEngine(store, FakeRemoteApi(capture_state), ManualConnectivity())
    await engine.drain_queue()

    assert seen_states == [SyncState.ONLINE_SYNCING]
    assert engine.state == SyncState.ONLINE_IDLE
    assert engine.sync_in_progress is False


@pytest.mark.asyncio
async def test_going_offline_mid_drain_lets_the_pass_finish():
    store = FakeLocalStore()
    for name in ("A", "B", "C"):
        await store.enqueue(_operation("/patients", {"name": name}))
    connectivity = ManualConnectivity()

    async def drop_connection(method, endpoint, data):
        if data == {"name": "A"}:
            await connectivity.set_offline()
        return {}

    remote = FakeRemoteApi(drop_connection)
    engine = SyncEngine(store, remote, connectivity)
    engine.start()

    result = await engine.drain_queue()

    assert result.attempted == 3
    assert engine.state == SyncState.OFFLINE


@pytest.mark.asyncio
async def test_drain_while_offline_is_skipped():
    store = FakeLocalStore()
    await store.enqueue(_operation("/patients", {"name": "A"}))
    remote = FakeRemoteApi()
    engine = SyncEngine(store, remote, ManualConnectivity(initially_online=False))

    result = await engine.drain_queue()

    assert result.skipped is True
    assert remote.calls == []
    assert len(store.queue) == 1


@pytest.mark.asyncio
async def test_trigger_sync_returns_false_when_offline():
    store = FakeLocalStore()
    await store.enqueue(_operation("/patients", {"name": "A"}))
    remote = FakeRemoteApi()
    engine = SyncEngine(store, remote, ManualConnectivity(initially_online=False))

    assert await engine.trigger_sync() is False
    assert remote.calls == []


@pytest.mark.asyncio
async def test_trigger_sync_returns_true_even_if_every_operation_fails():
    store = FakeLocalStore()
    await store.enqueue(_operation("/patients", {"name": "A"}))

    async def always_fail(method, endpoint, data):
        raise ApiRequestError(500, "boom")

    engine = SyncEngine(store, FakeRemoteApi(always_fail), ManualConnectivity())

    assert await engine.trigger_sync() is True
    assert engine.last_result.failed == 1


@pytest.mark.asyncio
async def test_trigger_sync_returns_false_when_queue_unreadable():
    store = FakeLocalStore()
    store.fail_reads = True
    engine = SyncEngine(store, FakeRemoteApi(), ManualConnectivity())

    assert await engine.trigger_sync() is False
    assert engine.state == SyncState.ONLINE_IDLE


@pytest.mark.asyncio
async def test_stop_unsubscribes_from_connectivity():
    store = FakeLocalStore()
    await store.enqueue(_operation("/patients", {"name": "A"}))
    connectivity = ManualConnectivity(initially_online=False)
    remote = FakeRemoteApi()
    engine = SyncEngine(store, remote, connectivity)
    engine.start()
    engine.stop()

    await connectivity.set_online()

    assert remote.calls == []
    assert len(store.queue) == 1


@pytest.mark.asyncio
async def test_non_json_acknowledgement_counts_as_delivered():
    store = FakeLocalStore()
    for name in ("A", "B", "C"):
        await store.enqueue(_operation("/patients", {"name": name}))

    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text="OK")

    client = HealthRecordsApiClient(
        base_url="http://api.test/api",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    engine = SyncEngine(store, client, ManualConnectivity())

    result = await engine.drain_queue()

    assert result.succeeded == 3
    assert len(requests) == 3
    assert store.queue == {}


@pytest.mark.asyncio
async def test_drain_waiting_on_lock_is_skipped_after_going_offline():
    store = FakeLocalStore()
    await store.enqueue(_operation("/patients", {"name": "A"}))
    connectivity = ManualConnectivity()
    in_flight = asyncio.Event()
    release = asyncio.Event()

    async def slow_failure(method, endpoint, data):
        in_flight.set()
        await release.wait()
        raise ApiRequestError(503, "Service unavailable")

    remote = FakeRemoteApi(slow_failure)
    engine = SyncEngine(store, remote, connectivity)
    engine.start()

    first = asyncio.create_task(engine.drain_queue())
    await in_flight.wait()
    second = asyncio.create_task(engine.drain_queue())
    await asyncio.sleep(0)

    await connectivity.set_offline()
    release.set()
    first_result, second_result = await asyncio.gather(first, second)

    assert first_result.failed == 1
    assert second_result.skipped is True
    assert len(remote.calls) == 1
    assert len(store.queue) == 1
    assert engine.state == SyncState.OFFLINE
