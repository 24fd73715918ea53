"""Shared fakes for the journal client tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from moodsense.client.api import InsightRequestError
from moodsense.client.journal import MoodJournal
from moodsense.client.repository import StoredMoodHistoryRepository
from moodsense.client.storage import InMemoryKeyValueStore, StorageError


class FakeInsights:
    """Records every request; optionally fails or waits on a gate."""

    def __init__(self, insight: str = "You're doing fine.", fail: bool = False) -> None:
        self.insight = insight
        self.fail = fail
        self.calls: list[tuple[int, str]] = []
        self.gate: Optional[asyncio.Event] = None

    async def request_insight(self, scale: int, description: str) -> str:
        self.calls.append((scale, description))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise InsightRequestError("Relay returned 500", status_code=500)
        return self.insight


class FailingStore:
    """KeyValueStore whose reads and/or writes always fail."""

    def __init__(self, fail_reads: bool = True, fail_writes: bool = True) -> None:
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.writes = 0

    async def get_item(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageError("disk unavailable")
        return None

    async def set_item(self, key: str, value: str) -> None:
        self.writes += 1
        if self.fail_writes:
            raise StorageError("disk full")


class StepClock:
    """Returns a time one second later on every call."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self._now
        self._now += timedelta(seconds=1)
        return current


class Notifications(list):
    def __call__(self, title: str, message: str) -> None:
        self.append((title, message))


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def insights() -> FakeInsights:
    return FakeInsights()


@pytest.fixture
def notifications() -> Notifications:
    return Notifications()


@pytest.fixture
def journal(store, insights, notifications) -> MoodJournal:
    return MoodJournal(
        StoredMoodHistoryRepository(store),
        insights,
        notify=notifications,
        clock=StepClock(),
    )
