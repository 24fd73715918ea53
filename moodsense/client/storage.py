"""
Key-Value Storage
=================
Minimal asynchronous string key-value stores for the journal client.

Two implementations of the same protocol:

  FileKeyValueStore      : one file per key under a data directory.
                           A write replaces the whole file atomically
                           (temp file + os.replace), so a crash mid-write
                           leaves the previous value in place.
  InMemoryKeyValueStore  : a dict. For tests and throwaway sessions.

Both raise StorageError for anything that goes wrong underneath. Callers
decide whether that is fatal; the journal treats it as non-fatal.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(Exception):
    """A read or write against the key-value store failed."""


class KeyValueStore(Protocol):
    async def get_item(self, key: str) -> Optional[str]: ...

    async def set_item(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store. Contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._data[key] = value


class FileKeyValueStore:
    """Stores each key as `<root>/<key>.json`."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()

    def _path_for(self, key: str) -> Path:
        if not _VALID_KEY.match(key) or key in {".", ".."}:
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._root / f"{key}.json"

    async def get_item(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return await asyncio.to_thread(self._read, path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Reading %s failed: %s", path, exc)
            raise StorageError(f"Failed to read {key!r}: {exc}") from exc

    async def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write, path, value)
        except OSError as exc:
            logger.error("Writing %s failed: %s", path, exc)
            raise StorageError(f"Failed to write {key!r}: {exc}") from exc

    @staticmethod
    def _read(path: Path) -> Optional[str]:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    @staticmethod
    def _write(path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            # leave no stray temp files behind
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
