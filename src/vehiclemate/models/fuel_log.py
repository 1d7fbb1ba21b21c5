"""Fuel log model."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from vehiclemate.models._base import CalendarDate, RecordBaseModel, RemoteId


class FuelLog(RecordBaseModel):
    """One refuelling of a vehicle (``fuel_logs`` bucket)."""

    _REMOTE_ID_FIELD: ClassVar[str] = "log_id"

    log_id: RemoteId = None
    """Server-assigned id (``logId``)."""
    date: CalendarDate = Field(default="")
    odometer: float = Field(gt=0)
    """Odometer reading at refuelling, in km."""
    liters: float = Field(gt=0)
    cost: float = Field(gt=0)
    vehicle_local_id: str = ""
    """Local id of the owning vehicle.  Not enforced; orphans are tolerated."""
