"""
Mood Journal
============
Client-side state and actions for the journal: the form, the pending
submission, the latest insight and the local history.

Submission flow:

    1. Refuse re-entry while a submission is pending
    2. Reject a blank description locally (no network call)
    3. Ask the relay for an insight (exactly one request)
    4. On failure: notify, keep the typed description, change nothing else
    5. On success: prepend a new entry, persist the full history, show the
       insight, clear the description

Persistence failures never undo the in-memory update. The on-disk copy
may lag behind until the next successful save.

All state is owned by one asyncio control flow, so the `submitting` flag
is enough to keep a second submit from starting: it is set before the
first await.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from moodsense.client.api import InsightRequestError
from moodsense.client.chart import trend_series
from moodsense.client.repository import MoodHistoryRepository
from moodsense.client.storage import StorageError
from moodsense.models.mood import MAX_SCALE, MIN_SCALE, MoodEntry

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 3

# User-facing messages
ERROR_TITLE = "Error"
MSG_EMPTY_DESCRIPTION = "Please enter a mood description"
MSG_LOAD_FAILED = "Failed to load mood history"
MSG_SAVE_FAILED = "Failed to save mood entry"
MSG_INSIGHT_FAILED = "Failed to get AI insight. Please try again."

Notifier = Callable[[str, str], None]
Clock = Callable[[], datetime]


class InsightSource(Protocol):
    async def request_insight(self, scale: int, description: str) -> str: ...


def _log_notification(title: str, message: str) -> None:
    logger.warning("%s: %s", title, message)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_entry(entry: MoodEntry) -> str:
    """Render one entry for the history list."""
    lines = [
        entry.timestamp.astimezone().strftime("%Y-%m-%d"),
        f"Mood: {entry.scale}/{MAX_SCALE}",
        entry.description,
    ]
    if entry.insight:
        lines.append(f"Insight: {entry.insight}")
    return "\n".join(lines)


@dataclass
class HistoryView:
    """What the history panel shows when it is open."""

    entries: list[str]
    trend: list[int]


class MoodJournal:
    """Holds the journal's UI state and performs its actions."""

    def __init__(
        self,
        repository: MoodHistoryRepository,
        insights: InsightSource,
        notify: Notifier | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._repository = repository
        self._insights = insights
        self._notify = notify if notify is not None else _log_notification
        self._clock = clock if clock is not None else _utc_now

        self._scale = DEFAULT_SCALE
        self.description = ""
        self.submitting = False
        self.current_insight = ""
        self.history: list[MoodEntry] = []
        self.show_history = False

    # ---- Form state ------------------------------------------------------

    @property
    def scale(self) -> int:
        return self._scale

    @scale.setter
    def scale(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_SCALE <= value <= MAX_SCALE:
            raise ValueError(f"scale must be an integer between {MIN_SCALE} and {MAX_SCALE}")
        self._scale = value

    # ---- Actions ---------------------------------------------------------

    async def load_history(self) -> None:
        """Load the stored history. Falls back to empty on any failure."""
        try:
            self.history = await self._repository.load()
        except StorageError as exc:
            logger.warning("Failed to load mood history: %s", exc)
            self.history = []
            self._notify(ERROR_TITLE, MSG_LOAD_FAILED)

    async def submit(self) -> Optional[MoodEntry]:
        """Submit the current form. Returns the new entry, or None."""
        if self.submitting:
            logger.debug("Submit ignored: a submission is already pending")
            return None

        if not self.description.strip():
            self._notify(ERROR_TITLE, MSG_EMPTY_DESCRIPTION)
            return None

        scale = self.scale
        description = self.description
        self.submitting = True
        try:
            try:
                insight = await self._insights.request_insight(scale, description)
            except InsightRequestError as exc:
                logger.warning("Failed to get AI insight: %s", exc)
                self._notify(ERROR_TITLE, MSG_INSIGHT_FAILED)
                return None

            entry = self._new_entry(scale, description, insight)
            await self._save_entry(entry)
            self.current_insight = insight
            self.description = ""
            return entry
        finally:
            self.submitting = False

    def toggle_history(self) -> bool:
        self.show_history = not self.show_history
        return self.show_history

    def trend_series(self) -> list[int]:
        return trend_series(self.history)

    def history_view(self) -> Optional[HistoryView]:
        """The rendered history panel, or None while it is hidden."""
        if not self.show_history:
            return None
        return HistoryView(
            entries=[format_entry(entry) for entry in self.history],
            trend=self.trend_series(),
        )

    # ---- Internals -------------------------------------------------------

    def _new_entry(self, scale: int, description: str, insight: str) -> MoodEntry:
        now = self._clock()
        millis = int(now.timestamp() * 1000)
        # ids stay unique even when two entries land in the same millisecond
        if self.history and self.history[0].id.isdigit():
            millis = max(millis, int(self.history[0].id) + 1)
        return MoodEntry(
            id=str(millis),
            scale=scale,
            description=description,
            timestamp=now,
            insight=insight,
        )

    async def _save_entry(self, entry: MoodEntry) -> None:
        updated = [entry, *self.history]
        self.history = updated
        try:
            await self._repository.save(updated)
        except StorageError as exc:
            logger.warning("Failed to save mood entry %s: %s", entry.id, exc)
            self._notify(ERROR_TITLE, MSG_SAVE_FAILED)
