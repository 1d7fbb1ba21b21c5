"""Record store: the three record buckets on top of a storage backend.

Buckets are the unit of persistence.  Every write serializes a complete
collection and hands it to the backend in one call, so a reader never
observes a half-updated bucket.  There is no per-record addressing here;
callers filter in memory.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any

import pydantic

from vehiclemate.exceptions import StorageError, ValidationError
from vehiclemate.models._base import RecordBaseModel
from vehiclemate.models.snapshot import RecordKind, Snapshot
from vehiclemate.storage.backends import StorageBackend

_logger = logging.getLogger(__name__)


def _coerce_kind(kind: RecordKind | str) -> RecordKind:
    try:
        return RecordKind(kind)
    except ValueError as exc:
        raise ValidationError(f"Unknown record kind: {kind!r}") from exc


def _check_records(kind: RecordKind, records: Iterable[Any]) -> list[RecordBaseModel]:
    model = kind.model
    checked: list[RecordBaseModel] = []
    for record in records:
        if not isinstance(record, model):
            raise ValidationError(f"{kind.value} bucket only holds {model.__name__} records, got {type(record).__name__}")
        checked.append(record)
    return checked


def _encode_bucket(records: Sequence[RecordBaseModel]) -> str:
    return json.dumps([record.to_wire() for record in records], separators=(",", ":"))


def _decode_bucket(kind: RecordKind, text: str | None) -> list[RecordBaseModel]:
    """Parse stored bucket text.

    Corrupt or legacy data degrades instead of raising: unparseable JSON or
    a non-array value yields an empty bucket, and individual entries that
    fail the record schema are dropped.
    """
    if text is None:
        return []
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        _logger.warning("Bucket %s holds invalid JSON; treating it as empty", kind.value)
        return []
    if not isinstance(decoded, list):
        _logger.warning("Bucket %s is not a JSON array (%s); treating it as empty", kind.value, type(decoded).__name__)
        return []

    model = kind.model
    records: list[RecordBaseModel] = []
    for index, item in enumerate(decoded):
        try:
            records.append(model.model_validate(item))
        except pydantic.ValidationError as exc:
            _logger.warning(
                "Dropping unreadable entry %d from bucket %s: %s",
                index,
                kind.value,
                exc.errors(include_url=False),
            )
    return records


class RecordStore:
    """Durable vehicles / fuel logs / other expenses collections.

    All methods accept either a :class:`RecordKind` or its storage key
    (``"vehicles"``, ``"fuel_logs"``, ``"other_expenses"``).
    """

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend
        self._locks: dict[RecordKind, asyncio.Lock] = {kind: asyncio.Lock() for kind in RecordKind}

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    async def _read_text(self, key: str) -> str | None:
        try:
            return await self._backend.get_item(key)
        except StorageError:
            raise
        except OSError as exc:
            raise StorageError(f"Could not read bucket {key}: {exc}", key=key) from exc

    async def _write_text(self, key: str, text: str) -> None:
        try:
            await self._backend.set_item(key, text)
        except StorageError:
            raise
        except OSError as exc:
            raise StorageError(f"Could not write bucket {key}: {exc}", key=key) from exc

    async def get_all(self, kind: RecordKind | str) -> list[RecordBaseModel]:
        """Return every record in the bucket (empty if absent or corrupt)."""
        bucket = _coerce_kind(kind)
        return _decode_bucket(bucket, await self._read_text(bucket.value))

    async def replace_all(self, kind: RecordKind | str, records: Iterable[RecordBaseModel]) -> None:
        """Overwrite the bucket with *records*, unconditionally."""
        bucket = _coerce_kind(kind)
        payload = _encode_bucket(_check_records(bucket, records))
        async with self._locks[bucket]:
            await self._write_text(bucket.value, payload)

    async def append(self, kind: RecordKind | str, record: RecordBaseModel) -> None:
        """Same as ``replace_all(kind, get_all(kind) + [record])``."""
        bucket = _coerce_kind(kind)
        _check_records(bucket, [record])
        async with self._locks[bucket]:
            current = await self.get_all(bucket)
            await self._write_text(bucket.value, _encode_bucket([*current, record]))

    async def snapshot(self) -> Snapshot:
        """Read all three buckets."""
        buckets = {kind.value: await self.get_all(kind) for kind in RecordKind}
        return Snapshot(**buckets)

    async def clear(self) -> None:
        """Remove all three buckets.  The stored identity is left alone."""
        for kind in RecordKind:
            async with self._locks[kind]:
                try:
                    await self._backend.remove_item(kind.value)
                except StorageError:
                    raise
                except OSError as exc:
                    raise StorageError(f"Could not remove bucket {kind.value}: {exc}", key=kind.value) from exc
        _logger.debug("Cleared local record buckets")
