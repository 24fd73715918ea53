"""
Mood History Repository
=======================
Loads and saves the whole mood history as a single JSON array under one
storage key, newest entry first.

There is no schema version and no incremental write: save() always
replaces the complete blob. A blob that fails validation is reported as a
StorageError rather than silently dropped, so the caller can tell the
user their history could not be read.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from pydantic import ValidationError

from moodsense.client.storage import KeyValueStore, StorageError
from moodsense.models.mood import MoodEntry, MoodHistoryAdapter

logger = logging.getLogger(__name__)

HISTORY_KEY = "moodHistory"


class MoodHistoryRepository(Protocol):
    async def load(self) -> list[MoodEntry]: ...

    async def save(self, entries: Sequence[MoodEntry]) -> None: ...


class StoredMoodHistoryRepository:
    """MoodHistoryRepository backed by any KeyValueStore."""

    def __init__(self, store: KeyValueStore, key: str = HISTORY_KEY) -> None:
        self._store = store
        self._key = key

    async def load(self) -> list[MoodEntry]:
        """Return the stored history, or [] if nothing has been saved yet.

        Raises StorageError if the read fails or the blob is unreadable.
        """
        raw = await self._store.get_item(self._key)
        if not raw:
            return []
        try:
            return MoodHistoryAdapter.validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Stored mood history is corrupt: {exc.error_count()} error(s)") from exc

    async def save(self, entries: Sequence[MoodEntry]) -> None:
        """Overwrite the stored history with `entries`. Raises StorageError."""
        blob = MoodHistoryAdapter.dump_json(list(entries)).decode("utf-8")
        await self._store.set_item(self._key, blob)
        logger.debug("Saved %d mood entries under %r", len(entries), self._key)
