"""Async key/value storage backends.

The interface mirrors the async key/value storage available to mobile
apps: string keys, string values, whole-value reads and writes.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import re
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from vehiclemate.exceptions import StorageError

_logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageBackend(Protocol):
    """Structural storage interface used by the record and session stores.

    Implementations must make :meth:`set_item` all-or-nothing: a reader
    sees either the previous value or the new one, never a mix.
    """

    async def get_item(self, key: str) -> str | None:
        ...

    async def set_item(self, key: str, value: str) -> None:
        ...

    async def remove_item(self, key: str) -> None:
        ...


class MemoryBackend:
    """Process-local backend, handy for tests and throwaway sessions."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    @property
    def items(self) -> dict[str, str]:
        return dict(self._items)

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileBackend:
    """One ``<key>.json`` file per key under *directory*.

    Writes go to a temporary file in the same directory followed by
    ``os.replace``, so a crash mid-write leaves the previous value intact.
    Blocking file I/O runs in a worker thread.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(f"Invalid storage key: {key!r}", key=key)
        return self._directory / f"{key}.json"

    def _read(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None

    def _write(self, path: Path, value: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=self._directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise

    async def get_item(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return await asyncio.to_thread(self._read, path)
        except OSError as exc:
            raise StorageError(f"Could not read {path}: {exc}", key=key) from exc

    async def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        _logger.debug("Writing %d bytes to %s", len(value), path)
        try:
            await asyncio.to_thread(self._write, path, value)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}", key=key) from exc

    async def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not remove {path}: {exc}", key=key) from exc
