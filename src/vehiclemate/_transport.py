"""JSON-over-HTTP transport."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from vehiclemate._constants import USER_AGENT
from vehiclemate.config import VehicleMateConfig
from vehiclemate.exceptions import TransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class JsonResponse:
    """Status and decoded body of one HTTP exchange.

    ``body`` is ``None`` when the response text was empty or not JSON;
    ``text`` always holds the raw response for error messages.
    """

    status: int
    body: Any
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> JsonResponse:
        ...


class HttpTransport:
    """POSTs JSON bodies to the remote authority.

    Non-2xx statuses are returned, not raised: each endpoint module
    decides what an error body means.  Connection failures and timeouts
    raise :class:`TransportError`.
    """

    def __init__(self, config: VehicleMateConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> JsonResponse:
        url = self._config.url_for(endpoint)
        headers = {
            "accept": "application/json",
            "content-type": "application/json; charset=UTF-8",
            "user-agent": USER_AGENT,
        }
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("POST %s", url)

        try:
            async with self._http.post(
                url,
                data=json.dumps(payload, separators=(",", ":")),
                headers=headers,
                timeout=timeout,
            ) as resp:
                status = resp.status
                # Undecodable bytes become U+FFFD so the body fails JSON parsing.
                text = await resp.text(errors="replace")
        except TimeoutError as exc:
            raise TransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise TransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        _logger.debug("HTTP %s from %s (%d bytes)", status, endpoint, len(text))

        body: Any = None
        if text.strip():
            try:
                body = json.loads(text)
            except json.JSONDecodeError:
                _logger.debug("Non-JSON body from %s: %s", endpoint, text[:200])
        return JsonResponse(status=status, body=body, text=text)
