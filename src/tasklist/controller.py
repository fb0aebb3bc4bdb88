"""TaskListController: owns the collection and applies user operations to it."""

from __future__ import annotations

import os
import threading
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Iterable

from tasklist import log
from tasklist.errors import ImportInProgressError, PersistenceWriteWarning
from tasklist.io_utils import read_bytes, write_bytes_atomic
from tasklist.ordering import project_for_display, reconcile_manual_order
from tasklist.store import PersistenceStore, export_filename, utc_now
from tasklist.tasks.model import TaskCollection, TaskRecord

Listener = Callable[[list[TaskRecord]], None]


def new_task_id() -> str:
    return uuid.uuid4().hex


class TaskListController:
    """Orchestrates mutations, persistence and re-render signals.

    Every mutating operation runs to completion: mutate the in-memory
    collection, save it, then notify listeners with the fresh display
    order. Unknown ids are silent no-ops.

    Usage::

        ctl = TaskListController(PersistenceStore(FileSlotStore(home)))
        ctl.subscribe(render)
        task = ctl.create("Buy milk", date(2026, 3, 5))
        ctl.toggle_completion(task.id)
        ctl.apply_manual_reorder(ids_after_drop)
    """

    def __init__(
        self,
        store: PersistenceStore,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self.store = store
        self._clock = clock
        self._id_factory = id_factory
        self._listeners: list[Listener] = []
        self._import_lock = threading.Lock()
        self.last_warning: PersistenceWriteWarning | None = None
        self.collection: TaskCollection = store.load()

    # ── observers ────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def display_order(self) -> list[TaskRecord]:
        return project_for_display(self.collection)

    def _notify(self) -> None:
        if not self._listeners:
            return
        shown = self.display_order()
        for listener in self._listeners:
            listener(shown)

    def _persist(self) -> bool:
        """Save the collection; a failed save is logged and remembered, not raised."""
        try:
            self.store.save(self.collection)
        except PersistenceWriteWarning as exc:
            self.last_warning = exc
            log.warn(str(exc))
            return False
        self.last_warning = None
        return True

    def _commit(self, *, render: bool = True) -> None:
        self._persist()
        if render:
            self._notify()

    # ── operations ───────────────────────────────────────────────

    def create(self, name: str, due_date: date | None = None) -> TaskRecord | None:
        """Insert a new task at the head of storage order. Blank names are ignored."""
        name = (name or "").strip()
        if not name:
            log.debug("Ignoring create with an empty name")
            return None
        task = TaskRecord(
            id=self._id_factory(),
            name=name,
            created_at=self._clock(),
            due_date=due_date,
        )
        self.collection.insert_front(task)
        log.debug(f"Task {task.id}: created")
        self._commit()
        return task

    def delete(self, task_id: str) -> bool:
        if not self.collection.remove(task_id):
            log.debug(f"Task {task_id}: delete ignored (unknown id)")
            return False
        log.debug(f"Task {task_id}: deleted")
        self._commit()
        return True

    def toggle_completion(self, task_id: str) -> TaskRecord | None:
        task = self.collection.get(task_id)
        if task is None:
            log.debug(f"Task {task_id}: toggle ignored (unknown id)")
            return None
        task.toggle(self._clock())
        state = "completed" if task.completed else "incomplete"
        log.debug(f"Task {task_id}: -> {state}")
        self._commit()
        return task

    def set_due_date(self, task_id: str, due_date: date | None) -> TaskRecord | None:
        task = self.collection.get(task_id)
        if task is None:
            log.debug(f"Task {task_id}: due date ignored (unknown id)")
            return None
        task.due_date = due_date
        log.debug(f"Task {task_id}: due date -> {due_date.isoformat() if due_date else 'none'}")
        self._commit()
        return task

    def apply_manual_reorder(self, new_id_order: Iterable[str]) -> None:
        """Commit the order reported by the view after a drop.

        Listeners are not notified: the view already shows this order.
        """
        self.collection = reconcile_manual_order(self.collection, new_id_order)
        log.debug("Storage order updated from drop")
        self._commit(render=False)

    def import_replace(self, data: bytes | str) -> int:
        """Replace every task with the document's tasks and return how many were imported.

        Parse failures propagate and leave the current collection untouched.
        Raises :class:`ImportInProgressError` if another import is running.
        """
        if not self._import_lock.acquire(blocking=False):
            raise ImportInProgressError()
        try:
            imported = self.store.parse_import_document(data)
            self.collection = imported
            log.debug(f"Imported {len(imported)} task(s), replacing previous list")
            self._commit()
            return len(imported)
        finally:
            self._import_lock.release()

    def import_file(self, path: Path | str) -> int:
        return self.import_replace(read_bytes(path))

    def export_current(self) -> bytes:
        return self.store.export_document(self.collection)

    def export_to(self, target: Path | str, today: date | None = None) -> Path:
        """Write the export document to *target*.

        An existing directory, a path ending in a separator, or a path without
        a suffix is treated as a directory (created if needed) and receives
        ``tasks-<date>.json``.
        """
        document = self.export_current()
        raw = str(target)
        path = Path(target)
        if path.is_dir() or raw.endswith(("/", os.sep)) or not path.suffix:
            path.mkdir(parents=True, exist_ok=True)
            path = path / export_filename(today or self._clock().date())
        write_bytes_atomic(path, document)
        return path
