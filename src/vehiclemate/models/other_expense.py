"""Other expense model."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field, field_validator

from vehiclemate._constants import DEFAULT_EXPENSE_CATEGORY
from vehiclemate.models._base import CalendarDate, RecordBaseModel, RemoteId


class OtherExpense(RecordBaseModel):
    """A non-fuel expense such as a service or a new tyre (``other_expenses`` bucket)."""

    _REMOTE_ID_FIELD: ClassVar[str] = "expense_id"

    expense_id: RemoteId = None
    """Server-assigned id (``expenseId``)."""
    date: CalendarDate = Field(default="")
    description: str = Field(min_length=1)
    category: str = DEFAULT_EXPENSE_CATEGORY
    cost: float = Field(gt=0)
    vehicle_local_id: str = ""

    @field_validator("description")
    @classmethod
    def _description_non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description must be non-empty")
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_EXPENSE_CATEGORY
        return value
