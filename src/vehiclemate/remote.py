"""Remote authority client.

The remote authority owns conflict resolution and remote-id assignment.
From the core's point of view it is two request/response exchanges:
a full snapshot sync and a login.
"""

from __future__ import annotations

import logging
from typing import Protocol

from vehiclemate._api.login import build_login_request, parse_login_response
from vehiclemate._api.sync import build_sync_request, parse_sync_response
from vehiclemate._redact import redact_for_log
from vehiclemate._transport import Transport
from vehiclemate.config import VehicleMateConfig
from vehiclemate.exceptions import SyncFailedError, TransportError
from vehiclemate.models.requests import LoginRequest
from vehiclemate.models.snapshot import Snapshot
from vehiclemate.models.user import UserIdentity

_logger = logging.getLogger(__name__)


class RemoteAuthority(Protocol):
    """What the sync coordinator needs from the server."""

    async def exchange(self, user_id: int, snapshot: Snapshot) -> Snapshot:
        ...


class HttpRemoteAuthority:
    """:class:`RemoteAuthority` over the JSON HTTP API."""

    def __init__(self, config: VehicleMateConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def exchange(self, user_id: int, snapshot: Snapshot) -> Snapshot:
        """Send the local snapshot and return the server's reconciled one.

        Raises
        ------
        SyncFailedError
            On transport errors, timeouts, non-2xx statuses or a malformed
            response body.
        """
        endpoint = self._config.sync_endpoint
        payload = build_sync_request(user_id, snapshot)
        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug("Sync payload=%s", redact_for_log(payload))
        try:
            response = await self._transport.post_json(endpoint, payload)
        except TransportError as exc:
            raise SyncFailedError(str(exc), status_code=exc.status_code, endpoint=endpoint) from exc
        return parse_sync_response(response, endpoint)

    async def login(self, request: LoginRequest) -> UserIdentity:
        """Exchange credentials for an identity.

        Raises
        ------
        AuthenticationError
            When the server rejects the credentials.
        TransportError
            When the server cannot be reached.
        """
        endpoint = self._config.login_endpoint
        response = await self._transport.post_json(endpoint, build_login_request(request))
        return parse_login_response(response, endpoint)
