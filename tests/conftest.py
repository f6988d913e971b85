"""Shared fixtures: in-memory note store, fixed clock, manual scheduler."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from bearmark.db import SqliteNoteStore, open_memory_db

if TYPE_CHECKING:
    import sqlite3
    from collections.abc import Callable, Generator


class FakeClock:
    """Returns ISO timestamps one second apart, starting 2026-02-09 07:00 UTC."""

    def __init__(self) -> None:
        self._now = datetime(2026, 2, 9, 7, 0, tzinfo=UTC)

    def __call__(self) -> str:
        self._now += timedelta(seconds=1)
        return self._now.isoformat()


@dataclass
class FakeTimer:
    delay: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Records scheduled callbacks; tests fire them explicitly."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire_all(self) -> None:
        """Run every pending callback, as if the delay had elapsed."""
        for timer in self.pending:
            timer.fired = True
            timer.callback()


@pytest.fixture
def tmp_db() -> Generator[sqlite3.Connection]:
    """Create an in-memory SQLite database with the full schema."""
    conn = open_memory_db()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def store(tmp_db: sqlite3.Connection) -> SqliteNoteStore:
    """A note store on the in-memory database with a deterministic clock."""
    return SqliteNoteStore(tmp_db, clock=FakeClock())


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()
