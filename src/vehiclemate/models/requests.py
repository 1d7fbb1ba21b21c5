"""Pydantic request models for client entrypoints.

These models provide a consistent "validate → normalize → execute" flow:
form input is validated here, the local id is stamped afterwards, and only
then is a stored record built.  They are used internally by
:class:`vehiclemate.client.VehicleMateClient`.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from vehiclemate._constants import DEFAULT_EXPENSE_CATEGORY
from vehiclemate.exceptions import ValidationError
from vehiclemate.models.fuel_log import FuelLog
from vehiclemate.models.other_expense import OtherExpense
from vehiclemate.models.vehicle import Vehicle


def _non_blank(value: str, field_name: str) -> str:
    text = value.strip()
    if not text:
        raise ValueError(f"{field_name} must be non-empty")
    return text


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def _datetime_to_date(cls, value: Any) -> Any:
        # Date pickers hand over a full datetime; only the calendar day is kept.
        if isinstance(value, dt.datetime):
            return value.date()
        return value


class NewVehicle(_RequestModel):
    name: str
    license_plate: str
    license_expiry: dt.date
    insurance_expiry: dt.date

    @field_validator("name", "license_plate")
    @classmethod
    def _required_text(cls, value: str, info: Any) -> str:
        return _non_blank(value, info.field_name)

    def to_record(self, local_id: str) -> Vehicle:
        return Vehicle(
            local_id=local_id,
            name=self.name,
            license_plate=self.license_plate,
            license_expiry=self.license_expiry,
            insurance_expiry=self.insurance_expiry,
        )


class _VehicleScopedRequest(_RequestModel):
    vehicle_local_id: str
    date: dt.date
    cost: float = Field(gt=0, allow_inf_nan=False)

    @field_validator("vehicle_local_id")
    @classmethod
    def _vehicle_non_empty(cls, value: str) -> str:
        return _non_blank(value, "vehicle_local_id")


class NewFuelLog(_VehicleScopedRequest):
    odometer: float = Field(gt=0, allow_inf_nan=False)
    liters: float = Field(gt=0, allow_inf_nan=False)

    def to_record(self, local_id: str) -> FuelLog:
        return FuelLog(
            local_id=local_id,
            date=self.date,
            odometer=self.odometer,
            liters=self.liters,
            cost=self.cost,
            vehicle_local_id=self.vehicle_local_id,
        )


class NewOtherExpense(_VehicleScopedRequest):
    description: str
    category: str = DEFAULT_EXPENSE_CATEGORY

    @field_validator("description")
    @classmethod
    def _description_non_empty(cls, value: str) -> str:
        return _non_blank(value, "description")

    @field_validator("category")
    @classmethod
    def _category_default(cls, value: str) -> str:
        return value.strip() or DEFAULT_EXPENSE_CATEGORY

    def to_record(self, local_id: str) -> OtherExpense:
        return OtherExpense(
            local_id=local_id,
            date=self.date,
            description=self.description,
            category=self.category,
            cost=self.cost,
            vehicle_local_id=self.vehicle_local_id,
        )


class LoginRequest(_RequestModel):
    model_config = ConfigDict(str_strip_whitespace=False)

    username: str
    password: str

    @field_validator("username")
    @classmethod
    def _username_non_empty(cls, value: str) -> str:
        return _non_blank(value, "username")

    @field_validator("password")
    @classmethod
    def _password_non_blank(cls, value: str) -> str:
        # Sent verbatim; surrounding whitespace may be part of the password.
        _non_blank(value, "password")
        return value


RequestT = TypeVar("RequestT", bound=_RequestModel)


def validate_request(model: type[RequestT], data: Mapping[str, Any]) -> RequestT:
    """Validate *data* into *model*, raising the library's ``ValidationError``."""
    try:
        return model.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        errors = [f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}" for err in exc.errors()]
        raise ValidationError(f"Invalid {model.__name__}: {'; '.join(errors)}", errors=errors) from exc
