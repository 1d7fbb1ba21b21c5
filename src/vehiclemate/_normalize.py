"""Normalization helpers.

Centralizes lenient parsing of stored and received values so models and
the metrics engine never have to guard against odd legacy data.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def parse_calendar_datetime(value: Any) -> datetime | None:
    """Parse a stored date into a naive wall-clock datetime.

    Accepts ``YYYY-MM-DD`` (midnight), full ISO-8601 timestamps and
    ``date``/``datetime`` objects.  Timezone-aware values keep their own
    wall-clock reading; the offset is dropped, not converted.  Anything
    else yields ``None``.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def parse_calendar_date(value: Any) -> date | None:
    parsed = parse_calendar_datetime(value)
    return parsed.date() if parsed is not None else None


def start_of_day(value: date | datetime) -> datetime:
    """Strip any time-of-day component (and tzinfo) from *value*."""
    return datetime(value.year, value.month, value.day)
