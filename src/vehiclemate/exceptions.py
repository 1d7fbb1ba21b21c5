"""Custom exception hierarchy for vehiclemate."""

from __future__ import annotations

from collections.abc import Sequence


class VehicleMateError(Exception):
    """Base exception for all vehiclemate errors."""


class ConfigError(VehicleMateError):
    """Invalid or missing configuration."""


class ValidationError(VehicleMateError, ValueError):
    """Malformed or out-of-range input at record-creation time.

    Raised before anything reaches the record store, so the caller can
    simply re-prompt.  ``errors`` carries the per-field messages when the
    failure came from model validation.
    """

    def __init__(self, message: str, *, errors: Sequence[str] = ()) -> None:
        self.errors = list(errors)
        super().__init__(message)


class StorageError(VehicleMateError):
    """Local persistence read/write failure."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class TransportError(VehicleMateError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class AuthenticationError(TransportError):
    """Login rejected by the remote authority."""


class AuthRequiredError(VehicleMateError):
    """Sync attempted without an authenticated identity.

    Detected locally; no request is sent.
    """


class SyncError(VehicleMateError):
    """Base for failures of a sync run."""


class SyncFailedError(SyncError):
    """The remote exchange did not succeed.

    Covers transport errors, timeouts, non-2xx responses and malformed
    response bodies.  Local state is untouched, so the sync can simply be
    retried.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class SyncInProgressError(SyncError):
    """A sync was requested while another one is still running."""


class PartialSyncError(SyncError):
    """The server answered but writing its snapshot locally failed partway.

    ``written`` lists the buckets already replaced with server data and
    ``failed`` names the bucket whose write raised.  Buckets after
    ``failed`` still hold pre-sync data.  Re-running the whole sync is safe.
    """

    def __init__(self, message: str, *, written: Sequence[str] = (), failed: str = "") -> None:
        self.written = list(written)
        self.failed = failed
        super().__init__(message)
