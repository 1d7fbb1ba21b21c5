from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from vehiclemate.exceptions import (
    AuthRequiredError,
    PartialSyncError,
    StorageError,
    SyncFailedError,
    SyncInProgressError,
)
from vehiclemate.models.fuel_log import FuelLog
from vehiclemate.models.snapshot import RecordKind, Snapshot
from vehiclemate.models.user import UserIdentity
from vehiclemate.models.vehicle import Vehicle
from vehiclemate.storage.backends import MemoryBackend
from vehiclemate.storage.store import RecordStore
from vehiclemate.sync import SyncCoordinator, SyncState, resolve_user_id

_FIXED_NOW = datetime(2025, 1, 15, 8, 30, tzinfo=UTC)

_SERVER_SNAPSHOT = Snapshot.model_validate(
    {
        "vehicles": [
            {
                "localId": "1",
                "vehicleId": 101,
                "name": "Pulsar",
                "licensePlate": "WP ABC-1234",
                "licenseExpiry": "2025-01-10",
                "insuranceExpiry": "2025-03-01",
            },
            {"localId": "7", "vehicleId": 102, "name": "Van", "licensePlate": "NC-9"},
        ],
        "fuelLogs": [
            {
                "localId": "2",
                "logId": 201,
                "date": "2025-01-05",
                "odometer": 45678,
                "liters": 10.5,
                "cost": 3500,
                "vehicleLocalId": "1",
            }
        ],
    }
)


@dataclass
class FakeRemote:
    response: Snapshot = field(default_factory=Snapshot)
    error: BaseException | None = None
    gate: asyncio.Event | None = None
    calls: list[tuple[int, Snapshot]] = field(default_factory=list)

    async def exchange(self, user_id: int, snapshot: Snapshot) -> Snapshot:
        self.calls.append((user_id, snapshot))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.response


class _FlakyBackend(MemoryBackend):
    """Fails writes to the keys in ``fail_keys``."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_keys: set[str] = set()
        self.fail_reads = False

    async def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("read error")
        return await super().get_item(key)

    async def set_item(self, key: str, value: str) -> None:
        if key in self.fail_keys:
            raise OSError(f"cannot write {key}")
        await super().set_item(key, value)


async def _seeded_store(backend: MemoryBackend) -> RecordStore:
    store = RecordStore(backend)
    await store.append(
        RecordKind.VEHICLES,
        Vehicle(local_id="1", name="Pulsar", license_plate="WP ABC-1234", license_expiry="2025-01-10"),
    )
    await store.append(
        RecordKind.FUEL_LOGS,
        FuelLog(local_id="2", date="2025-01-05", odometer=45678, liters=10.5, cost=3500, vehicle_local_id="1"),
    )
    return store


def _coordinator(store: RecordStore, remote: FakeRemote) -> SyncCoordinator:
    return SyncCoordinator(store, remote, clock=lambda: _FIXED_NOW)


# ------------------------------------------------------------------
# Authentication gate
# ------------------------------------------------------------------


@pytest.mark.parametrize("user", [None, 0, -1, True, "12", 1.5])
def test_resolve_user_id_rejects_missing_identity(user: object) -> None:
    with pytest.raises(AuthRequiredError, match="log in"):
        resolve_user_id(user)  # type: ignore[arg-type]


def test_resolve_user_id_accepts_identity_and_int() -> None:
    assert resolve_user_id(UserIdentity(user_id=5, username="kamal")) == 5
    assert resolve_user_id(12) == 12


@pytest.mark.asyncio
async def test_sync_without_identity_sends_nothing() -> None:
    backend = MemoryBackend()
    store = await _seeded_store(backend)
    remote = FakeRemote(response=_SERVER_SNAPSHOT)
    before = backend.items

    with pytest.raises(AuthRequiredError):
        await _coordinator(store, remote).sync(None)

    assert remote.calls == []
    assert backend.items == before


# ------------------------------------------------------------------
# Failure atomicity
# ------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        SyncFailedError("HTTP 500 from /syncVehicleData", status_code=500),
        TimeoutError(),
    ],
)
async def test_failed_exchange_leaves_local_state_untouched(error: BaseException) -> None:
    backend = MemoryBackend()
    store = await _seeded_store(backend)
    remote = FakeRemote(error=error)
    coordinator = _coordinator(store, remote)
    before = backend.items

    with pytest.raises(SyncFailedError):
        await coordinator.sync(12)

    assert backend.items == before
    assert coordinator.state is SyncState.IDLE


@pytest.mark.asyncio
async def test_unreadable_local_snapshot_sends_nothing() -> None:
    backend = _FlakyBackend()
    backend.fail_reads = True
    remote = FakeRemote(response=_SERVER_SNAPSHOT)

    with pytest.raises(StorageError):
        await _coordinator(RecordStore(backend), remote).sync(12)

    assert remote.calls == []


# ------------------------------------------------------------------
# Successful exchange
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_success_replaces_buckets_with_server_snapshot() -> None:
    backend = MemoryBackend()
    store = await _seeded_store(backend)
    remote = FakeRemote(response=_SERVER_SNAPSHOT)

    result = await _coordinator(store, remote).sync(UserIdentity(user_id=12, username="kamal"))

    user_id, sent = remote.calls[0]
    assert user_id == 12
    assert [v.local_id for v in sent.vehicles] == ["1"]
    assert [log.local_id for log in sent.fuel_logs] == ["2"]

    assert await store.snapshot() == _SERVER_SNAPSHOT
    assert json.loads(backend.items["other_expenses"]) == []
    assert result.snapshot == _SERVER_SNAPSHOT
    assert result.uploaded_unsynced == 2
    assert result.completed_at == _FIXED_NOW


@pytest.mark.asyncio
async def test_repeat_sync_uploads_nothing_new() -> None:
    backend = MemoryBackend()
    store = await _seeded_store(backend)
    coordinator = _coordinator(store, FakeRemote(response=_SERVER_SNAPSHOT))

    await coordinator.sync(12)
    second = await coordinator.sync(12)

    assert second.uploaded_unsynced == 0
    assert await store.snapshot() == _SERVER_SNAPSHOT


@pytest.mark.asyncio
async def test_empty_server_response_clears_buckets() -> None:
    backend = MemoryBackend()
    store = await _seeded_store(backend)

    await _coordinator(store, FakeRemote(response=Snapshot())).sync(12)

    for kind in RecordKind:
        assert await store.get_all(kind) == []


# ------------------------------------------------------------------
# Partial writes
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_partial_write_reports_buckets_and_retry_repairs() -> None:
    backend = _FlakyBackend()
    store = await _seeded_store(backend)
    coordinator = _coordinator(store, FakeRemote(response=_SERVER_SNAPSHOT))
    backend.fail_keys = {"fuel_logs"}

    with pytest.raises(PartialSyncError) as exc_info:
        await coordinator.sync(12)

    assert exc_info.value.written == ["vehicles"]
    assert exc_info.value.failed == "fuel_logs"
    assert coordinator.state is SyncState.IDLE
    assert len(await store.get_all(RecordKind.VEHICLES)) == 2

    backend.fail_keys = set()
    await coordinator.sync(12)
    assert await store.snapshot() == _SERVER_SNAPSHOT


# ------------------------------------------------------------------
# Overlap
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_overlapping_sync_is_rejected() -> None:
    store = await _seeded_store(MemoryBackend())
    remote = FakeRemote(response=_SERVER_SNAPSHOT, gate=asyncio.Event())
    coordinator = _coordinator(store, remote)

    first = asyncio.create_task(coordinator.sync(12))
    while not remote.calls:
        await asyncio.sleep(0)
    assert coordinator.is_syncing

    with pytest.raises(SyncInProgressError):
        await coordinator.sync(12)

    assert remote.gate is not None
    remote.gate.set()
    result = await first

    assert len(remote.calls) == 1
    assert result.snapshot == _SERVER_SNAPSHOT
    assert coordinator.state is SyncState.IDLE
