"""Login endpoint.

Endpoint:
  - /login

Request ``{username, password}``; success ``{userId, username}``,
failure ``{error}``.
"""

from __future__ import annotations

import logging
from typing import Any

import pydantic

from vehiclemate._redact import redact_for_log
from vehiclemate._transport import JsonResponse
from vehiclemate.exceptions import AuthenticationError
from vehiclemate.models.requests import LoginRequest
from vehiclemate.models.user import UserIdentity

_logger = logging.getLogger(__name__)

_DEFAULT_FAILURE_MESSAGE = "Invalid username or password."


def build_login_request(request: LoginRequest) -> dict[str, Any]:
    payload = {"username": request.username, "password": request.password}
    _logger.debug("Login payload=%s", redact_for_log(payload))
    return payload


def parse_login_response(response: JsonResponse, endpoint: str) -> UserIdentity:
    """Parse the login response.

    Raises
    ------
    AuthenticationError
        If the server rejected the credentials or answered without a
        usable identity.
    """
    body = response.body if isinstance(response.body, dict) else {}
    if not response.ok:
        message = body.get("error")
        raise AuthenticationError(
            str(message) if message else _DEFAULT_FAILURE_MESSAGE,
            status_code=response.status,
            endpoint=endpoint,
        )

    try:
        identity = UserIdentity.model_validate(body)
    except pydantic.ValidationError as exc:
        raise AuthenticationError(
            f"Login response from {endpoint} missing identity fields",
            status_code=response.status,
            endpoint=endpoint,
        ) from exc
    _logger.debug("Logged in as user_id=%s", identity.user_id)
    return identity
