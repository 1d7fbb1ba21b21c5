"""Persisted login identity.

The identity lives under the ``user`` storage key, beside the record
buckets.  Nothing in the core reads it implicitly: the caller loads it at
startup, saves it after login, clears it on logout and passes it to
:meth:`vehiclemate.sync.SyncCoordinator.sync` explicitly.
"""

from __future__ import annotations

import logging

import pydantic

from vehiclemate._constants import USER_KEY
from vehiclemate.models.user import UserIdentity
from vehiclemate.storage.backends import StorageBackend

_logger = logging.getLogger(__name__)


class SessionStore:
    """Load/save/clear the current :class:`UserIdentity`."""

    def __init__(self, backend: StorageBackend, *, key: str = USER_KEY) -> None:
        self._backend = backend
        self._key = key

    async def load(self) -> UserIdentity | None:
        """Return the stored identity, or ``None`` if absent or unreadable."""
        text = await self._backend.get_item(self._key)
        if text is None:
            return None
        try:
            return UserIdentity.model_validate_json(text)
        except pydantic.ValidationError:
            _logger.warning("Stored identity under %r is unreadable; ignoring it", self._key)
            return None

    async def save(self, identity: UserIdentity) -> None:
        await self._backend.set_item(self._key, identity.model_dump_json(by_alias=True))

    async def clear(self) -> None:
        await self._backend.remove_item(self._key)
