"""Shared fixtures for tasklist tests.

File handling in tests:
- Use tmp_path for any directory or file creation so tests are isolated and cleaned up.
- Use MemorySlotStore when a test only needs a durable slot, not a real file.
"""

from __future__ import annotations

import itertools
from datetime import date, datetime, timedelta, timezone

import pytest

from tasklist import log
from tasklist.controller import TaskListController
from tasklist.store import MemorySlotStore, PersistenceStore
from tasklist.tasks.model import TaskCollection, TaskRecord

T0 = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Deterministic clock; every call advances one second."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = current + timedelta(seconds=1)
        return current


@pytest.fixture(autouse=True)
def _quiet_log():
    log.set_verbose(False)
    yield
    log.set_verbose(False)


def _make_task(
    id: str,
    name: str = "",
    completed: bool = False,
    completed_at: datetime | None = None,
    due_date: date | None = None,
    created_at: datetime = T0,
) -> TaskRecord:
    if completed and completed_at is None:
        completed_at = T0
    return TaskRecord(
        id=id,
        name=name or f"Task {id}",
        created_at=created_at,
        due_date=due_date,
        completed=completed,
        completed_at=completed_at if completed else None,
    )


def _make_collection(tasks: list[TaskRecord]) -> TaskCollection:
    return TaskCollection(tasks)


@pytest.fixture
def make_task():
    """Factory fixture that creates TaskRecord instances."""
    return _make_task


@pytest.fixture
def make_collection():
    """Factory fixture that creates TaskCollection instances."""
    return _make_collection


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def slots() -> MemorySlotStore:
    return MemorySlotStore()


@pytest.fixture
def store(slots, clock) -> PersistenceStore:
    return PersistenceStore(slots, "tasks", clock=clock)


@pytest.fixture
def controller(store, clock) -> TaskListController:
    """Controller over an empty in-memory slot with ids t1, t2, ..."""
    counter = itertools.count(1)
    return TaskListController(store, clock=clock, id_factory=lambda: f"t{next(counter)}")
