"""Vehicle model."""

from __future__ import annotations

from datetime import date
from typing import ClassVar

from pydantic import Field

from vehiclemate._normalize import parse_calendar_date
from vehiclemate.models._base import CalendarDate, RecordBaseModel, RemoteId


class Vehicle(RecordBaseModel):
    """A vehicle owned by the user.

    Stored under the ``vehicles`` bucket.  Fuel logs and other expenses
    point back at it through :attr:`local_id`.
    """

    _REMOTE_ID_FIELD: ClassVar[str] = "vehicle_id"

    vehicle_id: RemoteId = None
    """Server-assigned id (``vehicleId``)."""
    name: str = ""
    """User-facing name (e.g. ``"My Bajaj Pulsar"``)."""
    license_plate: str = ""
    """License plate (e.g. ``"WP ABC-1234"``)."""
    license_expiry: CalendarDate = Field(default="")
    """Revenue license expiry date, ``YYYY-MM-DD``."""
    insurance_expiry: CalendarDate = Field(default="")
    """Insurance expiry date, ``YYYY-MM-DD``."""

    @property
    def license_expiry_date(self) -> date | None:
        return parse_calendar_date(self.license_expiry)

    @property
    def insurance_expiry_date(self) -> date | None:
        return parse_calendar_date(self.insurance_expiry)
