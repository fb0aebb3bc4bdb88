"""Ordering rules: display projection and manual (drag) reorder reconciliation.

Storage order is the manual order the user controls. The display order is
derived from it on every render and never written back::

    shown = project_for_display(collection)           # pending first, then done
    ids = move_in_order([t.id for t in shown], tid, 0)  # what the view reports on drop
    collection = reconcile_manual_order(collection, ids)
"""

from __future__ import annotations

from typing import Iterable

from tasklist import log
from tasklist.tasks.model import TaskCollection, TaskRecord


def project_for_display(collection: TaskCollection) -> list[TaskRecord]:
    """Return tasks in render order without touching *collection*.

    Incomplete tasks come first in storage order. Completed tasks follow,
    most recently completed first; equal ``completed_at`` values keep
    storage order (``sorted`` is stable under ``reverse=True``).
    """
    pending = collection.pending()
    done = sorted(collection.completed(), key=lambda t: t.completed_at, reverse=True)
    return pending + done


def reconcile_manual_order(
    collection: TaskCollection, new_id_order: Iterable[str]
) -> TaskCollection:
    """Build a new storage order from the id sequence reported after a drop.

    Unknown ids are ignored and repeated ids count once. Tasks the view
    did not report are appended in their previous relative order rather
    than dropped.
    """
    by_id = {t.id: t for t in collection}
    ordered: list[TaskRecord] = []
    placed: set[str] = set()
    stale: list[str] = []

    for task_id in new_id_order:
        task = by_id.get(task_id)
        if task is None:
            stale.append(task_id)
            continue
        if task_id in placed:
            continue
        placed.add(task_id)
        ordered.append(task)

    missing = [t for t in collection if t.id not in placed]
    ordered.extend(missing)

    if stale:
        log.debug(f"Reorder ignored unknown id(s): {', '.join(stale)}")
    if missing:
        log.debug(f"Reorder appended unreported id(s): {', '.join(t.id for t in missing)}")
    return TaskCollection(ordered)


def move_in_order(id_order: list[str], task_id: str, index: int) -> list[str]:
    """Return *id_order* with *task_id* dropped at position *index*.

    *index* is clamped to the list bounds. An unknown *task_id* leaves
    the order unchanged.
    """
    if task_id not in id_order:
        return list(id_order)
    rest = [i for i in id_order if i != task_id]
    index = max(0, min(index, len(rest)))
    return rest[:index] + [task_id] + rest[index:]
