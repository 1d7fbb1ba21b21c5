"""High-level async client for the vehicle-expense core."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from typing import Any

import aiohttp

from vehiclemate._transport import HttpTransport, Transport
from vehiclemate.config import VehicleMateConfig
from vehiclemate.exceptions import VehicleMateError
from vehiclemate.identity import LocalIdAssigner
from vehiclemate.metrics import compute_dashboard, vehicle_history
from vehiclemate.models.dashboard import Dashboard, VehicleHistory
from vehiclemate.models.fuel_log import FuelLog
from vehiclemate.models.other_expense import OtherExpense
from vehiclemate.models.requests import LoginRequest, NewFuelLog, NewOtherExpense, NewVehicle, validate_request
from vehiclemate.models.snapshot import RecordKind, SyncResult
from vehiclemate.models.user import UserIdentity
from vehiclemate.models.vehicle import Vehicle
from vehiclemate.remote import HttpRemoteAuthority
from vehiclemate.session import SessionStore
from vehiclemate.storage.backends import JsonFileBackend, StorageBackend
from vehiclemate.storage.store import RecordStore
from vehiclemate.sync import SyncCoordinator, SyncState, resolve_user_id

_logger = logging.getLogger(__name__)


class VehicleMateClient:
    """Async facade over the record store, metrics engine and sync.

    Usage::

        async with VehicleMateClient(config) as client:
            vehicle = await client.add_vehicle(
                "My Bajaj Pulsar", "WP ABC-1234", date(2025, 1, 10), date(2025, 3, 1)
            )
            dashboard = await client.get_dashboard()
            identity = await client.login("user", "secret")
            await client.sync(identity)

    Local reads and writes work without entering the context; login and
    sync need the HTTP session it opens.
    """

    def __init__(
        self,
        config: VehicleMateConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        backend: StorageBackend | None = None,
        transport: Transport | None = None,
        id_assigner: LocalIdAssigner | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._config = config or VehicleMateConfig()
        self._external_session = session is not None
        self._http_session = session
        self._backend = backend if backend is not None else JsonFileBackend(self._config.data_dir)
        self._store = RecordStore(self._backend)
        self._session_store = SessionStore(self._backend)
        self._ids = id_assigner or LocalIdAssigner()
        self._today = today
        self._injected_transport = transport
        self._remote: HttpRemoteAuthority | None = None
        self._coordinator: SyncCoordinator | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> VehicleMateClient:
        transport = self._injected_transport
        if transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(self._config, self._http_session)
        self._remote = HttpRemoteAuthority(self._config, transport)
        self._coordinator = SyncCoordinator(self._store, self._remote)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._remote = None
        self._coordinator = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> VehicleMateConfig:
        return self._config

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def session_store(self) -> SessionStore:
        """Where the caller keeps the logged-in identity between runs."""
        return self._session_store

    @property
    def sync_state(self) -> SyncState:
        if self._coordinator is None:
            return SyncState.IDLE
        return self._coordinator.state

    def _require_remote(self) -> HttpRemoteAuthority:
        if self._remote is None:
            raise VehicleMateError("Client not initialized. Use 'async with VehicleMateClient(...) as client:'")
        return self._remote

    def _require_coordinator(self) -> SyncCoordinator:
        if self._coordinator is None:
            raise VehicleMateError("Client not initialized. Use 'async with VehicleMateClient(...) as client:'")
        return self._coordinator

    # ------------------------------------------------------------------
    # Record creation
    # ------------------------------------------------------------------

    async def add_vehicle(
        self,
        name: str,
        license_plate: str,
        license_expiry: date | datetime,
        insurance_expiry: date | datetime,
    ) -> Vehicle:
        request = validate_request(
            NewVehicle,
            {
                "name": name,
                "license_plate": license_plate,
                "license_expiry": license_expiry,
                "insurance_expiry": insurance_expiry,
            },
        )
        vehicle = request.to_record(self._ids.next_id())
        await self._store.append(RecordKind.VEHICLES, vehicle)
        _logger.debug("Added vehicle local_id=%s", vehicle.local_id)
        return vehicle

    async def add_fuel_log(
        self,
        vehicle_local_id: str,
        *,
        odometer: float,
        liters: float,
        cost: float,
        date: date | datetime | None = None,
    ) -> FuelLog:
        """Record a refuelling.  ``date`` defaults to today."""
        request = validate_request(
            NewFuelLog,
            {
                "vehicle_local_id": vehicle_local_id,
                "date": date if date is not None else self._today(),
                "odometer": odometer,
                "liters": liters,
                "cost": cost,
            },
        )
        log = request.to_record(self._ids.next_id())
        await self._store.append(RecordKind.FUEL_LOGS, log)
        _logger.debug("Added fuel log local_id=%s vehicle=%s", log.local_id, log.vehicle_local_id)
        return log

    async def add_other_expense(
        self,
        vehicle_local_id: str,
        *,
        description: str,
        cost: float,
        category: str = "",
        date: date | datetime | None = None,
    ) -> OtherExpense:
        """Record a non-fuel expense.  A blank category becomes ``"General"``."""
        request = validate_request(
            NewOtherExpense,
            {
                "vehicle_local_id": vehicle_local_id,
                "date": date if date is not None else self._today(),
                "description": description,
                "category": category,
                "cost": cost,
            },
        )
        expense = request.to_record(self._ids.next_id())
        await self._store.append(RecordKind.OTHER_EXPENSES, expense)
        _logger.debug("Added other expense local_id=%s vehicle=%s", expense.local_id, expense.vehicle_local_id)
        return expense

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_vehicles(self) -> list[Vehicle]:
        return (await self._store.snapshot()).vehicles

    async def get_vehicle(self, local_id: str) -> Vehicle | None:
        for vehicle in await self.get_vehicles():
            if vehicle.local_id == local_id:
                return vehicle
        return None

    async def get_vehicle_history(self, local_id: str) -> VehicleHistory:
        snapshot = await self._store.snapshot()
        return vehicle_history(local_id, snapshot.fuel_logs, snapshot.other_expenses)

    async def get_dashboard(self, as_of: date | datetime | None = None) -> Dashboard:
        """Reminders and month-to-date totals as of *as_of* (default today)."""
        snapshot = await self._store.snapshot()
        return compute_dashboard(
            snapshot.vehicles,
            snapshot.fuel_logs,
            as_of if as_of is not None else self._today(),
            other_expenses=snapshot.other_expenses,
            window_days=self._config.reminder_window_days,
            currency=self._config.currency,
        )

    # ------------------------------------------------------------------
    # Remote
    # ------------------------------------------------------------------

    async def login(self, username: str, password: str) -> UserIdentity:
        """Exchange credentials for an identity.

        The identity is returned, not stored: persist it through
        :attr:`session_store` if it should survive a restart.
        """
        request = validate_request(LoginRequest, {"username": username, "password": password})
        return await self._require_remote().login(request)

    async def sync(self, user: UserIdentity | int | None) -> SyncResult:
        """Run a full snapshot sync as *user*.  See :meth:`SyncCoordinator.sync`."""
        resolve_user_id(user)
        return await self._require_coordinator().sync(user)

    async def clear_local_data(self) -> None:
        """Delete all local records (the stored identity is kept)."""
        await self._store.clear()
