"""Derived metrics: expiry reminders and monthly cost aggregates.

Everything here is a pure function of the records passed in and the
reference date; nothing touches storage.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from vehiclemate._constants import DEFAULT_CURRENCY, REMINDER_WINDOW_DAYS
from vehiclemate._normalize import parse_calendar_datetime, start_of_day
from vehiclemate.models.dashboard import Dashboard, Reminder, ReminderKind, VehicleHistory
from vehiclemate.models.fuel_log import FuelLog
from vehiclemate.models.other_expense import OtherExpense
from vehiclemate.models.vehicle import Vehicle

_ONE_DAY = timedelta(days=1)

_REMINDER_LABELS: dict[ReminderKind, str] = {
    ReminderKind.LICENSE: "License",
    ReminderKind.INSURANCE: "Insurance",
}


def days_until(expiry: object, as_of: date | datetime) -> int | None:
    """Whole days from the start of *as_of*'s day until *expiry*, rounded up.

    Returns ``None`` when *expiry* is missing or unparseable.
    """
    expiry_at = parse_calendar_datetime(expiry)
    if expiry_at is None:
        return None
    return math.ceil((expiry_at - start_of_day(as_of)) / _ONE_DAY)


def describe_days_left(days_left: int) -> str:
    """Human wording for a reminder's countdown."""
    if days_left == 0:
        return "Expires Today!"
    if days_left == 1:
        return "in 1 day"
    return f"in {days_left} days"


def upcoming_reminders(
    vehicles: Iterable[Vehicle],
    as_of: date | datetime,
    *,
    window_days: int = REMINDER_WINDOW_DAYS,
) -> list[Reminder]:
    reminders: list[Reminder] = []
    for vehicle in vehicles:
        expiries = (
            (ReminderKind.LICENSE, vehicle.license_expiry),
            (ReminderKind.INSURANCE, vehicle.insurance_expiry),
        )
        for kind, expiry in expiries:
            days_left = days_until(expiry, as_of)
            if days_left is None or not 0 <= days_left <= window_days:
                continue
            reminders.append(
                Reminder(
                    message=f"{vehicle.name} - {_REMINDER_LABELS[kind]} expires",
                    days_left=days_left,
                    kind=kind,
                    vehicle_local_id=vehicle.local_id,
                )
            )
    # list.sort is stable: equal countdowns keep vehicle order
    reminders.sort(key=lambda reminder: reminder.days_left)
    return reminders


def _in_month(value: object, as_of: date | datetime) -> bool:
    parsed = parse_calendar_datetime(value)
    return parsed is not None and parsed.year == as_of.year and parsed.month == as_of.month


def monthly_cost(records: Iterable[FuelLog | OtherExpense], as_of: date | datetime) -> float:
    """Sum of ``cost`` over records dated in *as_of*'s calendar month.

    Records with unparseable dates never match.  ``math.fsum`` keeps the
    total independent of record order.
    """
    return math.fsum(record.cost for record in records if _in_month(record.date, as_of))


def compute_dashboard(
    vehicles: Iterable[Vehicle],
    fuel_logs: Iterable[FuelLog],
    as_of: date | datetime,
    *,
    other_expenses: Iterable[OtherExpense] = (),
    window_days: int = REMINDER_WINDOW_DAYS,
    currency: str = DEFAULT_CURRENCY,
) -> Dashboard:
    """Compute the dashboard for *as_of*.

    Parameters
    ----------
    vehicles : iterable of Vehicle
        Source of license/insurance reminders.
    fuel_logs : iterable of FuelLog
        Source of the monthly fuel total.
    as_of : date or datetime
        Reference day.  Any time-of-day component is ignored.
    other_expenses : iterable of OtherExpense
        Optional source of the monthly non-fuel total.
    window_days : int
        Expiries at most this many days away produce a reminder.
    currency : str
        Display currency code attached to the totals.

    Returns
    -------
    Dashboard
        Sorted reminders and month-to-date totals.
    """
    return Dashboard(
        reminders=upcoming_reminders(vehicles, as_of, window_days=window_days),
        monthly_fuel_cost=monthly_cost(fuel_logs, as_of),
        monthly_other_cost=monthly_cost(other_expenses, as_of),
        currency=currency,
    )


def _newest_first(records: Sequence[FuelLog | OtherExpense]) -> list[FuelLog | OtherExpense]:
    dated = [(parse_calendar_datetime(record.date), record) for record in records]
    known = sorted((item for item in dated if item[0] is not None), key=lambda item: item[0], reverse=True)
    unknown = [record for when, record in dated if when is None]
    return [record for _, record in known] + unknown


def vehicle_history(
    vehicle_local_id: str,
    fuel_logs: Iterable[FuelLog],
    other_expenses: Iterable[OtherExpense],
) -> VehicleHistory:
    """Fuel logs and other expenses of one vehicle, newest first.

    Entries with unparseable dates go last, in stored order.
    """
    logs = [log for log in fuel_logs if log.vehicle_local_id == vehicle_local_id]
    expenses = [exp for exp in other_expenses if exp.vehicle_local_id == vehicle_local_id]
    return VehicleHistory(
        vehicle_local_id=vehicle_local_id,
        fuel_logs=_newest_first(logs),
        other_expenses=_newest_first(expenses),
    )
