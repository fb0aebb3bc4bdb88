"""TaskRecord and TaskCollection data models shared by the store, ordering and controller."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Iterable, Iterator


def format_timestamp(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def parse_timestamp(raw: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; ``Z`` or no offset means UTC. Invalid -> ``None``."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(raw: Any) -> date | None:
    """Parse a ``YYYY-MM-DD`` calendar date. Empty or invalid -> ``None``."""
    if isinstance(raw, date) and not isinstance(raw, datetime):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


@dataclass
class TaskRecord:
    """A single task.

    ``completed_at`` is set exactly while ``completed`` is true.
    """

    id: str
    name: str
    created_at: datetime
    due_date: date | None = None
    completed: bool = False
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.completed and self.completed_at is None:
            raise ValueError(f"Task {self.id}: completed without completed_at")
        if not self.completed and self.completed_at is not None:
            raise ValueError(f"Task {self.id}: completed_at set on an incomplete task")

    # ── completion state machine ─────────────────────────────────

    def mark_completed(self, now: datetime) -> None:
        self.completed = True
        self.completed_at = now

    def mark_incomplete(self) -> None:
        self.completed = False
        self.completed_at = None

    def toggle(self, now: datetime) -> None:
        if self.completed:
            self.mark_incomplete()
        else:
            self.mark_completed(now)

    # ── wire shape ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "date": self.due_date.isoformat() if self.due_date else "",
            "completed": self.completed,
        }
        if self.completed and self.completed_at is not None:
            data["completedAt"] = format_timestamp(self.completed_at)
        data["createdAt"] = format_timestamp(self.created_at)
        return data

    @classmethod
    def from_dict(cls, raw: Any, now: datetime) -> TaskRecord | None:
        """Build a record from a deserialized element, or ``None`` if it does not qualify.

        An element qualifies when it has a non-empty ``id`` (a string, or an
        integer that is converted to one) and a non-empty ``name``. Other
        fields are coerced leniently; *now* fills in timestamps that are
        missing or unreadable.
        """
        if not isinstance(raw, dict):
            return None
        task_id = raw.get("id")
        if isinstance(task_id, int) and not isinstance(task_id, bool):
            task_id = str(task_id)
        name = raw.get("name")
        if not isinstance(task_id, str) or not task_id.strip():
            return None
        if not isinstance(name, str) or not name.strip():
            return None

        completed = raw.get("completed") is True
        completed_at = parse_timestamp(raw.get("completedAt")) if completed else None
        if completed and completed_at is None:
            completed_at = now

        return cls(
            id=task_id,
            name=name,
            created_at=parse_timestamp(raw.get("createdAt")) or now,
            due_date=parse_date(raw.get("date")),
            completed=completed,
            completed_at=completed_at,
        )


@dataclass
class TaskCollection:
    """Ordered, id-unique sequence of tasks. The sequence is the storage order."""

    tasks: list[TaskRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for t in self.tasks:
            if t.id in seen:
                raise ValueError(f"Duplicate task id: {t.id}")
            seen.add(t.id)

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[TaskRecord]:
        return iter(self.tasks)

    def __bool__(self) -> bool:
        return bool(self.tasks)

    def ids(self) -> list[str]:
        return [t.id for t in self.tasks]

    def get(self, task_id: str) -> TaskRecord | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def pending(self) -> list[TaskRecord]:
        return [t for t in self.tasks if not t.completed]

    def completed(self) -> list[TaskRecord]:
        return [t for t in self.tasks if t.completed]

    def insert_front(self, task: TaskRecord) -> None:
        if self.get(task.id) is not None:
            raise ValueError(f"Duplicate task id: {task.id}")
        self.tasks.insert(0, task)

    def remove(self, task_id: str) -> bool:
        for idx, t in enumerate(self.tasks):
            if t.id == task_id:
                del self.tasks[idx]
                return True
        return False

    def copy(self) -> TaskCollection:
        """Deep-enough copy: new list, new record objects."""
        return TaskCollection([replace(t) for t in self.tasks])

    @classmethod
    def from_records(cls, records: Iterable[TaskRecord]) -> TaskCollection:
        """Build a collection keeping the first record seen for each id."""
        seen: set[str] = set()
        kept: list[TaskRecord] = []
        for r in records:
            if r.id in seen:
                continue
            seen.add(r.id)
            kept.append(r)
        return cls(kept)
