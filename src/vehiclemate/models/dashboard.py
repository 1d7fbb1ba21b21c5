"""Derived dashboard values."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from vehiclemate._constants import DEFAULT_CURRENCY
from vehiclemate.models.fuel_log import FuelLog
from vehiclemate.models.other_expense import OtherExpense


class ReminderKind(StrEnum):
    LICENSE = "license"
    INSURANCE = "insurance"


class Reminder(BaseModel):
    """An expiry falling inside the reminder window."""

    model_config = ConfigDict(frozen=True)

    message: str
    days_left: int = Field(ge=0)
    kind: ReminderKind
    vehicle_local_id: str

    @property
    def expires_today(self) -> bool:
        return self.days_left == 0


class Dashboard(BaseModel):
    model_config = ConfigDict(frozen=True)

    reminders: list[Reminder] = Field(default_factory=list)
    """Sorted ascending by ``days_left``; ties keep vehicle order."""
    monthly_fuel_cost: float = 0.0
    monthly_other_cost: float = 0.0
    currency: str = DEFAULT_CURRENCY
    """Display currency code of the monthly totals."""

    @property
    def monthly_total_cost(self) -> float:
        return self.monthly_fuel_cost + self.monthly_other_cost


class VehicleHistory(BaseModel):
    """One vehicle's fuel logs and other expenses, newest first."""

    model_config = ConfigDict(frozen=True)

    vehicle_local_id: str
    fuel_logs: list[FuelLog] = Field(default_factory=list)
    other_expenses: list[OtherExpense] = Field(default_factory=list)
