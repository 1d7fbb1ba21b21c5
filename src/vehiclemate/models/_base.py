"""Base model for stored and synced records.

Every record model inherits from :class:`RecordBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys used in local
  storage and on the wire map to snake_case fields.
* ``extra="ignore"`` so fields added by newer app or server versions
  do not break older readers.
* :meth:`RecordBaseModel.to_wire` for the storage/wire representation.

Calendar dates are kept as text (:data:`CalendarDate`) rather than parsed
into ``date`` objects: legacy or server-provided records with odd dates
must still load, and consumers parse them leniently on demand.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from vehiclemate._normalize import parse_calendar_date, safe_float


def _coerce_date_text(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if value is None:
        return ""
    return value


CalendarDate = Annotated[str, BeforeValidator(_coerce_date_text)]
"""Annotated type storing a calendar date as ``YYYY-MM-DD`` text."""


def _coerce_remote_id(value: Any) -> Any:
    if value is None or value == "":
        return None
    parsed = safe_float(value)
    if parsed is None or not parsed.is_integer():
        # left for pydantic to reject
        return value
    return int(parsed)


RemoteId = Annotated[int | None, BeforeValidator(_coerce_remote_id)]
"""Annotated type for server-assigned integer ids (absent until first sync)."""


class RecordBaseModel(BaseModel):
    """Base for the three record kinds.

    Subclasses declare their remote id field name in ``_REMOTE_ID_FIELD``.
    """

    _REMOTE_ID_FIELD: ClassVar[str] = ""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    local_id: str = Field(min_length=1)
    """Identifier assigned on-device at creation; never changes."""

    @property
    def remote_id(self) -> int | None:
        """Identifier assigned by the remote authority, if synced."""
        if not self._REMOTE_ID_FIELD:
            return None
        value: int | None = getattr(self, self._REMOTE_ID_FIELD)
        return value

    @property
    def is_synced(self) -> bool:
        return self.remote_id is not None

    @property
    def parsed_date(self) -> date | None:
        """The record's own ``date`` field parsed, or ``None``."""
        return parse_calendar_date(getattr(self, "date", None))

    def to_wire(self) -> dict[str, Any]:
        """camelCase dict used both in local storage and in sync payloads."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
