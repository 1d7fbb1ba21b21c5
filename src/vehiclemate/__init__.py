"""vehiclemate - local-first vehicle expense records with on-demand cloud sync."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vehiclemate")
except PackageNotFoundError:
    __version__ = "0+local"

from vehiclemate.client import VehicleMateClient
from vehiclemate.config import VehicleMateConfig
from vehiclemate.exceptions import (
    AuthenticationError,
    AuthRequiredError,
    ConfigError,
    PartialSyncError,
    StorageError,
    SyncError,
    SyncFailedError,
    SyncInProgressError,
    TransportError,
    ValidationError,
    VehicleMateError,
)
from vehiclemate.identity import LocalIdAssigner
from vehiclemate.metrics import compute_dashboard, describe_days_left, vehicle_history
from vehiclemate.models import (
    Dashboard,
    FuelLog,
    OtherExpense,
    RecordKind,
    Reminder,
    ReminderKind,
    Snapshot,
    SyncResult,
    UserIdentity,
    Vehicle,
    VehicleHistory,
)
from vehiclemate.remote import HttpRemoteAuthority, RemoteAuthority
from vehiclemate.session import SessionStore
from vehiclemate.storage.backends import JsonFileBackend, MemoryBackend, StorageBackend
from vehiclemate.storage.store import RecordStore
from vehiclemate.sync import SyncCoordinator, SyncState

__all__ = [
    "__version__",
    "AuthRequiredError",
    "AuthenticationError",
    "ConfigError",
    "Dashboard",
    "FuelLog",
    "HttpRemoteAuthority",
    "JsonFileBackend",
    "LocalIdAssigner",
    "MemoryBackend",
    "OtherExpense",
    "PartialSyncError",
    "RecordKind",
    "RecordStore",
    "Reminder",
    "ReminderKind",
    "RemoteAuthority",
    "SessionStore",
    "Snapshot",
    "StorageBackend",
    "StorageError",
    "SyncCoordinator",
    "SyncError",
    "SyncFailedError",
    "SyncInProgressError",
    "SyncResult",
    "SyncState",
    "TransportError",
    "UserIdentity",
    "ValidationError",
    "Vehicle",
    "VehicleHistory",
    "VehicleMateClient",
    "VehicleMateConfig",
    "VehicleMateError",
    "compute_dashboard",
    "describe_days_left",
    "vehicle_history",
]
