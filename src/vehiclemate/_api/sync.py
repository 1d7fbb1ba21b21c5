"""Snapshot sync endpoint.

Endpoint:
  - /syncVehicleData

The request carries the complete local snapshot plus the user id; the
response is the server's complete reconciled snapshot.
"""

from __future__ import annotations

import logging
from typing import Any

import pydantic

from vehiclemate._transport import JsonResponse
from vehiclemate.exceptions import SyncFailedError
from vehiclemate.models.snapshot import Snapshot

_logger = logging.getLogger(__name__)

_COLLECTION_KEYS: tuple[str, ...] = ("vehicles", "fuelLogs", "otherExpenses")


def build_sync_request(user_id: int, snapshot: Snapshot) -> dict[str, Any]:
    return {"userId": user_id, **snapshot.to_wire()}


def parse_sync_response(response: JsonResponse, endpoint: str) -> Snapshot:
    """Validate the server's reconciled snapshot.

    Absent or ``null`` collections are empty.  Anything else that does
    not match the record schema fails the whole exchange: accepting a
    partially readable response would silently delete records locally.
    """
    if not response.ok:
        raise SyncFailedError(
            f"HTTP {response.status} from {endpoint}: {response.text[:200]}",
            status_code=response.status,
            endpoint=endpoint,
        )
    body = response.body
    if not isinstance(body, dict):
        raise SyncFailedError(
            f"Malformed sync response from {endpoint}: expected a JSON object",
            status_code=response.status,
            endpoint=endpoint,
        )

    collections: dict[str, Any] = {}
    for key in _COLLECTION_KEYS:
        value = body.get(key)
        if value is None:
            continue
        if not isinstance(value, list):
            raise SyncFailedError(
                f"Malformed sync response from {endpoint}: {key} is {type(value).__name__}, not a list",
                status_code=response.status,
                endpoint=endpoint,
            )
        collections[key] = value

    try:
        snapshot = Snapshot.model_validate(collections)
    except pydantic.ValidationError as exc:
        raise SyncFailedError(
            f"Malformed sync response from {endpoint}: {exc.error_count()} invalid record field(s)",
            status_code=response.status,
            endpoint=endpoint,
        ) from exc

    _logger.debug(
        "Sync response: %d vehicles, %d fuel logs, %d other expenses",
        len(snapshot.vehicles),
        len(snapshot.fuel_logs),
        len(snapshot.other_expenses),
    )
    return snapshot
