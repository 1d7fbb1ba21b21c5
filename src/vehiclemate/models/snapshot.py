"""Record kinds, the three-bucket snapshot and the sync result."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from vehiclemate.models._base import RecordBaseModel
from vehiclemate.models.fuel_log import FuelLog
from vehiclemate.models.other_expense import OtherExpense
from vehiclemate.models.vehicle import Vehicle


class RecordKind(StrEnum):
    """The three record buckets.  Values are the storage keys."""

    VEHICLES = "vehicles"
    FUEL_LOGS = "fuel_logs"
    OTHER_EXPENSES = "other_expenses"

    @property
    def model(self) -> type[RecordBaseModel]:
        return _KIND_MODELS[self]


_KIND_MODELS: dict[RecordKind, type[RecordBaseModel]] = {
    RecordKind.VEHICLES: Vehicle,
    RecordKind.FUEL_LOGS: FuelLog,
    RecordKind.OTHER_EXPENSES: OtherExpense,
}


class Snapshot(BaseModel):
    """Complete contents of all three buckets at one point in time.

    The same shape travels both ways in a sync exchange (``vehicles``,
    ``fuelLogs``, ``otherExpenses``).  A key missing from a server
    response means an empty collection.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    vehicles: list[Vehicle] = Field(default_factory=list)
    fuel_logs: list[FuelLog] = Field(default_factory=list)
    other_expenses: list[OtherExpense] = Field(default_factory=list)

    def records(self, kind: RecordKind) -> list[RecordBaseModel]:
        return list(getattr(self, kind.value))

    @property
    def unsynced_count(self) -> int:
        """Number of records that have never been accepted by the server."""
        return sum(1 for kind in RecordKind for record in self.records(kind) if not record.is_synced)

    def to_wire(self) -> dict[str, Any]:
        return {
            "vehicles": [v.to_wire() for v in self.vehicles],
            "fuelLogs": [log.to_wire() for log in self.fuel_logs],
            "otherExpenses": [exp.to_wire() for exp in self.other_expenses],
        }


class SyncResult(BaseModel):
    """Outcome of a successful sync."""

    model_config = ConfigDict(frozen=True)

    snapshot: Snapshot
    """The server's reconciled snapshot, now the local state."""
    uploaded_unsynced: int = 0
    """Records sent without a remote id (first-time uploads)."""
    completed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
