"""
Tests for MoodJournal
=====================
Covers:
- Defaults: scale 3, empty form, history hidden
- Load: absent history → empty; corrupt/unreadable → empty + notification
- Validation: blank description never reaches the relay
- Submit success: entry prepended, persisted, insight shown, input cleared
- Submit failure: nothing persisted, description kept, notification shown
- Save failure: in-memory history kept, notification shown
- Ordering: N submissions → N entries, newest first
- Re-entry guard: two rapid submits → exactly one relay call
- History panel: toggle, formatting, trend series bound

Run: pytest tests/test_journal.py -v
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from moodsense.client.api import InsightClient
from moodsense.client.journal import (
    DEFAULT_SCALE,
    MSG_EMPTY_DESCRIPTION,
    MSG_INSIGHT_FAILED,
    MSG_LOAD_FAILED,
    MSG_SAVE_FAILED,
    MoodJournal,
    format_entry,
)
from moodsense.client.repository import HISTORY_KEY, StoredMoodHistoryRepository
from moodsense.client.storage import FileKeyValueStore
from moodsense.models.mood import MoodEntry

from conftest import FailingStore, FakeInsights, Notifications, StepClock


def _journal_with(store, insights=None, notifications=None) -> MoodJournal:
    return MoodJournal(
        StoredMoodHistoryRepository(store),
        insights or FakeInsights(),
        notify=notifications if notifications is not None else Notifications(),
        clock=StepClock(),
    )


class TestDefaults:

    @pytest.mark.asyncio
    async def test_empty_notifier_collection_is_still_used(self, store):
        received = Notifications()
        journal = _journal_with(store, notifications=received)

        await journal.submit()

        assert received == [("Error", MSG_EMPTY_DESCRIPTION)]

    def test_initial_state(self, journal):
        assert journal.scale == DEFAULT_SCALE == 3
        assert journal.description == ""
        assert journal.submitting is False
        assert journal.current_insight == ""
        assert journal.history == []
        assert journal.show_history is False

    @pytest.mark.parametrize("bad", [0, 6, -1, 2.5, True, "3"])
    def test_scale_outside_slider_range_rejected(self, journal, bad):
        with pytest.raises(ValueError):
            journal.scale = bad
        assert journal.scale == 3


class TestLoadHistory:

    @pytest.mark.asyncio
    async def test_non_utf8_history_file_falls_back_to_empty(self, tmp_path, notifications):
        (tmp_path / "moodHistory.json").write_bytes(b"\xff\xfe[garbage")
        journal = _journal_with(FileKeyValueStore(tmp_path), notifications=notifications)

        await journal.load_history()

        assert journal.history == []
        assert notifications == [("Error", MSG_LOAD_FAILED)]

    @pytest.mark.asyncio
    async def test_absent_history_is_empty(self, journal, notifications):
        await journal.load_history()

        assert journal.history == []
        assert notifications == []

    @pytest.mark.asyncio
    async def test_corrupt_history_falls_back_to_empty(self, store, notifications):
        await store.set_item(HISTORY_KEY, "{not json")
        journal = _journal_with(store, notifications=notifications)

        await journal.load_history()

        assert journal.history == []
        assert notifications == [("Error", MSG_LOAD_FAILED)]

    @pytest.mark.asyncio
    async def test_unreadable_store_falls_back_to_empty(self, notifications):
        journal = _journal_with(FailingStore(), notifications=notifications)

        await journal.load_history()

        assert journal.history == []
        assert notifications == [("Error", MSG_LOAD_FAILED)]


class TestValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("blank", ["", "   ", "\n\t "])
    async def test_blank_description_never_calls_relay(self, journal, insights, notifications, store, blank):
        journal.description = blank

        result = await journal.submit()

        assert result is None
        assert insights.calls == []
        assert notifications == [("Error", MSG_EMPTY_DESCRIPTION)]
        assert journal.history == []
        assert journal.submitting is False
        assert await store.get_item(HISTORY_KEY) is None


class TestSubmitSuccess:

    @pytest.mark.asyncio
    async def test_entry_created_and_persisted(self, journal, insights, store):
        journal.scale = 4
        journal.description = "feeling okay today"

        entry = await journal.submit()

        assert insights.calls == [(4, "feeling okay today")]
        assert entry is not None
        assert entry.scale == 4
        assert entry.description == "feeling okay today"
        assert entry.insight == "You're doing fine."
        assert entry.timestamp == datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        assert entry.id == str(int(entry.timestamp.timestamp() * 1000))

        assert journal.history == [entry]
        assert journal.current_insight == "You're doing fine."
        assert journal.description == ""
        assert journal.submitting is False

        stored = await StoredMoodHistoryRepository(store).load()
        assert stored == [entry]

    @pytest.mark.asyncio
    async def test_history_is_newest_first(self, journal, store):
        for i in range(5):
            journal.scale = (i % 5) + 1
            journal.description = f"entry {i}"
            await journal.submit()

        assert len(journal.history) == 5
        assert [e.description for e in journal.history] == [f"entry {i}" for i in reversed(range(5))]
        stamps = [e.timestamp for e in journal.history]
        assert stamps == sorted(stamps, reverse=True)
        assert len({e.id for e in journal.history}) == 5

        stored = await StoredMoodHistoryRepository(store).load()
        assert stored == journal.history

    @pytest.mark.asyncio
    async def test_ids_unique_when_clock_does_not_advance(self, store):
        fixed = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        journal = MoodJournal(StoredMoodHistoryRepository(store), FakeInsights(), clock=lambda: fixed)

        for text in ("one", "two"):
            journal.description = text
            await journal.submit()

        assert journal.history[0].id != journal.history[1].id

    @pytest.mark.asyncio
    async def test_submission_appends_to_loaded_history(self, store):
        first = _journal_with(store)
        first.description = "yesterday"
        await first.submit()

        second = _journal_with(store)
        await second.load_history()
        second.description = "today"
        await second.submit()

        assert [e.description for e in second.history] == ["today", "yesterday"]


class TestSubmitFailure:

    @pytest.mark.asyncio
    async def test_relay_failure_changes_nothing(self, store, notifications):
        insights = FakeInsights(fail=True)
        journal = _journal_with(store, insights=insights, notifications=notifications)
        journal.current_insight = "previous insight"
        journal.description = "keep me"

        result = await journal.submit()

        assert result is None
        assert len(insights.calls) == 1
        assert notifications == [("Error", MSG_INSIGHT_FAILED)]
        assert journal.history == []
        assert journal.current_insight == "previous insight"
        assert journal.description == "keep me"
        assert journal.submitting is False
        assert await store.get_item(HISTORY_KEY) is None

    @pytest.mark.asyncio
    async def test_save_failure_keeps_in_memory_entry(self, notifications):
        failing = FailingStore(fail_reads=False, fail_writes=True)
        journal = _journal_with(failing, notifications=notifications)
        journal.description = "written nowhere"

        entry = await journal.submit()

        assert entry is not None
        assert failing.writes == 1
        assert journal.history == [entry]
        assert journal.current_insight == "You're doing fine."
        assert journal.description == ""
        assert notifications == [("Error", MSG_SAVE_FAILED)]

    @pytest.mark.asyncio
    async def test_malformed_relay_url_is_a_request_failure(self, store, notifications):
        journal = MoodJournal(
            StoredMoodHistoryRepository(store),
            InsightClient("http://[::1"),
            notify=notifications,
        )
        journal.description = "hello"

        result = await journal.submit()

        assert result is None
        assert notifications == [("Error", MSG_INSIGHT_FAILED)]
        assert journal.description == "hello"
        assert journal.submitting is False


class TestReentryGuard:

    @pytest.mark.asyncio
    async def test_rapid_double_submit_issues_one_request(self, journal, insights):
        insights.gate = asyncio.Event()
        journal.description = "double tap"

        first = asyncio.create_task(journal.submit())
        await asyncio.sleep(0)
        assert journal.submitting is True

        second = await journal.submit()
        insights.gate.set()
        entry = await first

        assert second is None
        assert entry is not None
        assert len(insights.calls) == 1
        assert len(journal.history) == 1
        assert journal.submitting is False


class TestHistoryPanel:

    def test_toggle_flips_visibility(self, journal):
        assert journal.toggle_history() is True
        assert journal.show_history is True
        assert journal.toggle_history() is False

    @pytest.mark.asyncio
    async def test_hidden_panel_renders_nothing(self, journal):
        journal.description = "hi"
        await journal.submit()

        assert journal.history_view() is None

    @pytest.mark.asyncio
    async def test_visible_panel_lists_entries_and_trend(self, journal):
        for scale in (2, 4, 5):
            journal.scale = scale
            journal.description = f"mood {scale}"
            await journal.submit()
        journal.toggle_history()

        view = journal.history_view()

        assert len(view.entries) == 3
        assert "Mood: 5/5" in view.entries[0]
        assert view.trend == [2, 4, 5]

    @pytest.mark.asyncio
    async def test_trend_series_bounded_to_seven(self, journal):
        for i in range(10):
            journal.scale = (i % 5) + 1
            journal.description = f"entry {i}"
            await journal.submit()

        series = journal.trend_series()

        assert len(series) == 7
        # newest seven, oldest of them first
        assert series == [e.scale for e in reversed(journal.history[:7])]


class TestFormatEntry:

    def test_entry_with_insight(self):
        entry = MoodEntry(
            id="1",
            scale=2,
            description="tired",
            timestamp=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc),
            insight="Rest up.",
        )

        text = format_entry(entry)

        lines = text.splitlines()
        assert lines[1:] == ["Mood: 2/5", "tired", "Insight: Rest up."]

    def test_entry_without_insight_omits_line(self):
        entry = MoodEntry(
            id="1",
            scale=5,
            description="great",
            timestamp=datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc),
        )

        assert "Insight" not in format_entry(entry)
