from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pytest

from vehiclemate._api.login import build_login_request, parse_login_response
from vehiclemate._api.sync import build_sync_request, parse_sync_response
from vehiclemate._transport import JsonResponse
from vehiclemate.config import VehicleMateConfig
from vehiclemate.exceptions import AuthenticationError, SyncFailedError, TransportError
from vehiclemate.models.requests import LoginRequest
from vehiclemate.models.snapshot import Snapshot
from vehiclemate.remote import HttpRemoteAuthority

_VEHICLE = {
    "localId": "1",
    "vehicleId": 101,
    "name": "Pulsar",
    "licensePlate": "WP ABC-1234",
    "licenseExpiry": "2025-01-10",
    "insuranceExpiry": "2025-03-01",
}


@dataclass
class RecordingTransport:
    response: JsonResponse = field(default_factory=lambda: JsonResponse(status=200, body={}))
    error: Exception | None = None
    requests: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    async def post_json(self, endpoint: str, payload: dict[str, Any]) -> JsonResponse:
        self.requests.append((endpoint, dict(payload)))
        if self.error is not None:
            raise self.error
        return self.response


# ------------------------------------------------------------------
# Login
# ------------------------------------------------------------------


def test_login_payload_logged_without_password(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="vehiclemate._api.login"):
        payload = build_login_request(LoginRequest(username="kamal", password="hunter2"))

    assert payload == {"username": "kamal", "password": "hunter2"}
    assert "hunter2" not in caplog.text
    assert "<redacted>" in caplog.text


def test_login_success_returns_identity() -> None:
    identity = parse_login_response(JsonResponse(status=200, body={"userId": 12, "username": "kamal"}), "/login")
    assert identity.user_id == 12
    assert identity.username == "kamal"


def test_login_failure_uses_server_error_text() -> None:
    response = JsonResponse(status=401, body={"error": "Account locked"})
    with pytest.raises(AuthenticationError, match="Account locked") as exc_info:
        parse_login_response(response, "/login")
    assert exc_info.value.status_code == 401
    assert exc_info.value.endpoint == "/login"


def test_login_failure_without_body_has_generic_message() -> None:
    with pytest.raises(AuthenticationError, match="Invalid username or password"):
        parse_login_response(JsonResponse(status=500, body=None, text="oops"), "/login")


def test_login_success_without_user_id_is_rejected() -> None:
    with pytest.raises(AuthenticationError, match="missing identity"):
        parse_login_response(JsonResponse(status=200, body={"username": "kamal"}), "/login")


def test_authentication_error_is_transport_error() -> None:
    assert issubclass(AuthenticationError, TransportError)


# ------------------------------------------------------------------
# Sync
# ------------------------------------------------------------------


def test_sync_request_carries_user_and_all_collections() -> None:
    snapshot = Snapshot.model_validate({"vehicles": [_VEHICLE]})

    payload = build_sync_request(12, snapshot)

    assert payload == {"userId": 12, "vehicles": [_VEHICLE], "fuelLogs": [], "otherExpenses": []}


def test_sync_response_missing_and_null_collections_are_empty() -> None:
    snapshot = parse_sync_response(
        JsonResponse(status=200, body={"vehicles": [_VEHICLE], "fuelLogs": None}),
        "/syncVehicleData",
    )
    assert [v.vehicle_id for v in snapshot.vehicles] == [101]
    assert snapshot.fuel_logs == []
    assert snapshot.other_expenses == []


@pytest.mark.parametrize(
    "response",
    [
        JsonResponse(status=500, body=None, text="Internal Server Error"),
        JsonResponse(status=200, body=None, text="<html>"),
        JsonResponse(status=200, body=[_VEHICLE]),
        JsonResponse(status=200, body={"vehicles": {"localId": "1"}}),
        JsonResponse(status=200, body={"vehicles": [_VEHICLE, {"name": "no local id"}]}),
        JsonResponse(status=200, body={"fuelLogs": [{"localId": "2", "date": "2025-01-05", "odometer": -1}]}),
    ],
)
def test_sync_response_failures(response: JsonResponse) -> None:
    with pytest.raises(SyncFailedError) as exc_info:
        parse_sync_response(response, "/syncVehicleData")
    assert exc_info.value.endpoint == "/syncVehicleData"
    assert exc_info.value.status_code == response.status


def test_sync_http_error_message_mentions_status() -> None:
    with pytest.raises(SyncFailedError, match="HTTP 503"):
        parse_sync_response(JsonResponse(status=503, body=None, text="down"), "/syncVehicleData")


# ------------------------------------------------------------------
# HttpRemoteAuthority
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_remote_exchange_posts_to_sync_endpoint() -> None:
    transport = RecordingTransport(response=JsonResponse(status=200, body={"vehicles": [_VEHICLE]}))
    remote = HttpRemoteAuthority(VehicleMateConfig(sync_endpoint="/sync"), transport)

    snapshot = await remote.exchange(7, Snapshot())

    assert transport.requests == [("/sync", {"userId": 7, "vehicles": [], "fuelLogs": [], "otherExpenses": []})]
    assert snapshot.vehicles[0].remote_id == 101


@pytest.mark.asyncio
async def test_remote_exchange_logs_shortened_payload(caplog: pytest.LogCaptureFixture) -> None:
    vehicles = [{**_VEHICLE, "localId": str(i)} for i in range(25)]
    remote = HttpRemoteAuthority(VehicleMateConfig(), RecordingTransport())

    with caplog.at_level(logging.DEBUG, logger="vehiclemate.remote"):
        await remote.exchange(7, Snapshot.model_validate({"vehicles": vehicles}))

    assert "<5 more>" in caplog.text
    assert "'localId': '24'" not in caplog.text


@pytest.mark.asyncio
async def test_remote_exchange_maps_transport_errors() -> None:
    transport = RecordingTransport(error=TransportError("connection refused", endpoint="/syncVehicleData"))
    remote = HttpRemoteAuthority(VehicleMateConfig(), transport)

    with pytest.raises(SyncFailedError, match="connection refused"):
        await remote.exchange(7, Snapshot())


@pytest.mark.asyncio
async def test_remote_login_round_trip() -> None:
    transport = RecordingTransport(response=JsonResponse(status=200, body={"userId": 3, "username": "nimal"}))
    remote = HttpRemoteAuthority(VehicleMateConfig(), transport)

    identity = await remote.login(LoginRequest(username="nimal", password="pw"))

    assert identity.user_id == 3
    assert transport.requests == [("/login", {"username": "nimal", "password": "pw"})]


@pytest.mark.asyncio
async def test_remote_login_unreachable_server_raises_transport_error() -> None:
    transport = RecordingTransport(error=TransportError("Request to /login failed", endpoint="/login"))
    remote = HttpRemoteAuthority(VehicleMateConfig(), transport)

    with pytest.raises(TransportError):
        await remote.login(LoginRequest(username="nimal", password="pw"))
