"""Sync coordinator: full snapshot exchange with the remote authority.

One sync is a read-snapshot → exchange → replace-buckets cycle.  The
server's response is authoritative and replaces the local buckets
wholesale; nothing is merged on the device.  Local state is only touched
after the exchange succeeded, so a failed exchange leaves it exactly as it
was.  The three bucket writes are independent: if one fails, the buckets
written before it already hold server data and :class:`PartialSyncError`
reports which.  Re-running the sync repairs that state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum

from vehiclemate.exceptions import (
    AuthRequiredError,
    PartialSyncError,
    StorageError,
    SyncFailedError,
    SyncInProgressError,
)
from vehiclemate.models.snapshot import RecordKind, SyncResult
from vehiclemate.models.user import UserIdentity
from vehiclemate.remote import RemoteAuthority
from vehiclemate.storage.store import RecordStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SyncState(StrEnum):
    IDLE = "idle"
    SYNCING = "syncing"


def resolve_user_id(user: UserIdentity | int | None) -> int:
    """Return the user id to sync as, or raise :class:`AuthRequiredError`."""
    if isinstance(user, UserIdentity):
        return user.user_id
    if isinstance(user, bool) or not isinstance(user, int) or user <= 0:
        raise AuthRequiredError("You must log in to sync your data")
    return user


class SyncCoordinator:
    """Runs syncs between a :class:`RecordStore` and a remote authority.

    Overlapping calls are rejected with :class:`SyncInProgressError`
    rather than queued: two interleaved snapshot/replace cycles could
    overwrite each other's results.
    """

    def __init__(
        self,
        store: RecordStore,
        remote: RemoteAuthority,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._remote = remote
        self._clock = clock
        self._state = SyncState.IDLE

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def is_syncing(self) -> bool:
        return self._state is SyncState.SYNCING

    async def sync(self, user: UserIdentity | int | None) -> SyncResult:
        """Exchange the local snapshot with the server and adopt its answer.

        Parameters
        ----------
        user : UserIdentity or int
            The authenticated identity (or its user id).  ``None`` means
            nobody is logged in.

        Returns
        -------
        SyncResult
            The adopted snapshot, reported only after all three buckets
            were written.

        Raises
        ------
        AuthRequiredError
            No identity; no request was made.
        SyncInProgressError
            Another sync is still running.
        StorageError
            The local snapshot could not be read; nothing was sent.
        SyncFailedError
            The exchange failed; local state is unchanged.
        PartialSyncError
            The exchange succeeded but a bucket write failed.
        """
        user_id = resolve_user_id(user)
        if self._state is SyncState.SYNCING:
            raise SyncInProgressError("A sync is already in progress")

        self._state = SyncState.SYNCING
        try:
            return await self._run(user_id)
        finally:
            self._state = SyncState.IDLE

    async def _run(self, user_id: int) -> SyncResult:
        local = await self._store.snapshot()
        unsynced = local.unsynced_count

        try:
            reconciled = await self._remote.exchange(user_id, local)
        except TimeoutError as exc:
            raise SyncFailedError("Sync exchange timed out") from exc

        written: list[str] = []
        for kind in RecordKind:
            try:
                await self._store.replace_all(kind, reconciled.records(kind))
            except StorageError as exc:
                _logger.warning("Sync stopped after writing %s; %s failed: %s", written or "nothing", kind.value, exc)
                raise PartialSyncError(
                    f"Server data was only partially saved ({kind.value} failed); sync again",
                    written=written,
                    failed=kind.value,
                ) from exc
            written.append(kind.value)

        result = SyncResult(snapshot=reconciled, uploaded_unsynced=unsynced, completed_at=self._clock())
        _logger.info(
            "Sync complete for user_id=%s: %d vehicles, %d fuel logs, %d other expenses (%d first-time uploads)",
            user_id,
            len(reconciled.vehicles),
            len(reconciled.fuel_logs),
            len(reconciled.other_expenses),
            unsynced,
        )
        return result
