"""Data models for stored records, sync payloads and derived values."""

from vehiclemate.models._base import CalendarDate, RecordBaseModel, RemoteId
from vehiclemate.models.dashboard import Dashboard, Reminder, ReminderKind, VehicleHistory
from vehiclemate.models.fuel_log import FuelLog
from vehiclemate.models.other_expense import OtherExpense
from vehiclemate.models.requests import LoginRequest, NewFuelLog, NewOtherExpense, NewVehicle
from vehiclemate.models.snapshot import RecordKind, Snapshot, SyncResult
from vehiclemate.models.user import UserIdentity
from vehiclemate.models.vehicle import Vehicle

__all__ = [
    "CalendarDate",
    "Dashboard",
    "FuelLog",
    "LoginRequest",
    "NewFuelLog",
    "NewOtherExpense",
    "NewVehicle",
    "OtherExpense",
    "RecordBaseModel",
    "RecordKind",
    "Reminder",
    "ReminderKind",
    "RemoteId",
    "Snapshot",
    "SyncResult",
    "UserIdentity",
    "Vehicle",
    "VehicleHistory",
]
