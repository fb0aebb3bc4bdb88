"""Persistence: durable key-value slots, load/save, and the import/export document."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Protocol

from tasklist import log
from tasklist.errors import (
    EmptyCollectionError,
    InvalidShapeError,
    MalformedDocumentError,
    NoValidRecordsError,
    PersistenceWriteWarning,
)
from tasklist.io_utils import read_text, write_text_atomic
from tasklist.tasks.model import TaskCollection, TaskRecord


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ── Slot stores ──────────────────────────────────────────────────────


class SlotQuotaExceededError(OSError):
    """Raised by a slot store when a value does not fit."""


class SlotStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class FileSlotStore:
    """One ``<key>.json`` file per key inside *directory*."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.is_file():
            return None
        try:
            return read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            log.debug(f"Could not read slot {path}: {exc}")
            return None

    def set(self, key: str, value: str) -> None:
        write_text_atomic(self.path_for(key), value)


class MemorySlotStore:
    """In-process slots; *quota* caps the stored characters across all keys."""

    def __init__(self, quota: int | None = None) -> None:
        self.quota = quota
        self.slots: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota is not None:
            used = sum(len(v) for k, v in self.slots.items() if k != key)
            if used + len(value) > self.quota:
                raise SlotQuotaExceededError(
                    f"Slot quota exceeded ({used + len(value)} > {self.quota} chars)"
                )
        self.slots[key] = value


# ── Document helpers ─────────────────────────────────────────────────


def serialize(collection: TaskCollection, *, indent: int | None = None) -> str:
    return json.dumps([t.to_dict() for t in collection], indent=indent, ensure_ascii=False)


def records_from_items(items: list[Any], now: datetime) -> TaskCollection:
    """Keep qualifying elements in order; duplicates of an id keep the first."""
    records: list[TaskRecord] = []
    for raw in items:
        record = TaskRecord.from_dict(raw, now)
        if record is not None:
            records.append(record)
    return TaskCollection.from_records(records)


def export_filename(today: date | None = None) -> str:
    """Download name for an export: ``tasks-<YYYY-MM-DD>.json``."""
    day = today or date.today()
    return f"tasks-{day.isoformat()}.json"


class PersistenceStore:
    """Load/save a :class:`TaskCollection` under one key of a slot store."""

    def __init__(
        self,
        slots: SlotStore,
        key: str = "tasks",
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.slots = slots
        self.key = key
        self._clock = clock

    def load(self) -> TaskCollection:
        """Read the slot. Missing or unreadable content yields an empty collection."""
        raw = self.slots.get(self.key)
        if raw is None:
            log.debug(f"Slot '{self.key}' is empty; starting with no tasks")
            return TaskCollection()
        try:
            items = json.loads(raw)
        except json.JSONDecodeError as exc:
            log.debug(f"Slot '{self.key}' is corrupt ({exc}); starting with no tasks")
            return TaskCollection()
        if not isinstance(items, list):
            log.debug(f"Slot '{self.key}' does not hold a list; starting with no tasks")
            return TaskCollection()
        collection = records_from_items(items, self._clock())
        log.debug(f"Loaded {len(collection)} task(s) from slot '{self.key}'")
        return collection

    def save(self, collection: TaskCollection) -> None:
        """Overwrite the slot with *collection*.

        Raises :class:`PersistenceWriteWarning` when the slot rejects the write.
        """
        payload = serialize(collection)
        try:
            self.slots.set(self.key, payload)
        except OSError as exc:
            raise PersistenceWriteWarning(f"Could not save tasks: {exc}") from exc
        log.debug(f"Saved {len(collection)} task(s) to slot '{self.key}'")

    def export_document(self, collection: TaskCollection) -> bytes:
        if not collection:
            raise EmptyCollectionError()
        return (serialize(collection, indent=2) + "\n").encode("utf-8")

    def parse_import_document(self, data: bytes | str) -> TaskCollection:
        """Parse an import document into a replacement collection.

        Raises :class:`MalformedDocumentError`, :class:`InvalidShapeError`
        or :class:`NoValidRecordsError`. Elements without a non-empty
        ``id`` and ``name`` are dropped without being reported.
        """
        try:
            text = data.decode("utf-8-sig") if isinstance(data, bytes) else data
            items = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedDocumentError(f"Import file is not valid JSON: {exc}") from exc
        if not isinstance(items, list):
            raise InvalidShapeError()
        collection = records_from_items(items, self._clock())
        if not collection:
            raise NoValidRecordsError()
        dropped = len(items) - len(collection)
        if dropped:
            log.debug(f"Import skipped {dropped} invalid or duplicate element(s)")
        return collection
