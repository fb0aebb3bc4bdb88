"""Contract tests for TaskRecord / TaskCollection."""

from __future__ import annotations

from dataclasses import fields
from datetime import date, datetime, timezone

import pytest

from tasklist.tasks.model import TaskCollection, TaskRecord, parse_date, parse_timestamp

T0 = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def test_task_record_field_names() -> None:
    names = {f.name for f in fields(TaskRecord)}
    assert names == {"id", "name", "created_at", "due_date", "completed", "completed_at"}


def test_new_record_defaults_incomplete() -> None:
    t = TaskRecord(id="1", name="A", created_at=T0)
    assert t.completed is False
    assert t.completed_at is None
    assert t.due_date is None


class TestCompletionStateMachine:
    def test_completed_requires_timestamp(self):
        with pytest.raises(ValueError):
            TaskRecord(id="1", name="A", created_at=T0, completed=True)

    def test_incomplete_rejects_timestamp(self):
        with pytest.raises(ValueError):
            TaskRecord(id="1", name="A", created_at=T0, completed_at=T0)

    def test_complete_sets_timestamp(self, make_task):
        t = make_task("1")
        t.toggle(T0)
        assert t.completed is True
        assert t.completed_at == T0

    def test_reopen_clears_timestamp(self, make_task):
        t = make_task("1", completed=True)
        t.toggle(T0)
        assert t.completed is False
        assert t.completed_at is None


class TestWireShape:
    def test_incomplete_omits_completed_at(self, make_task):
        data = make_task("1", name="A").to_dict()
        assert data == {
            "id": "1",
            "name": "A",
            "date": "",
            "completed": False,
            "createdAt": "2026-03-01T09:00:00Z",
        }

    def test_completed_includes_completed_at_and_date(self, make_task):
        data = make_task("1", completed=True, due_date=date(2026, 3, 5)).to_dict()
        assert data["completedAt"] == "2026-03-01T09:00:00Z"
        assert data["date"] == "2026-03-05"

    def test_from_dict_requires_id_and_name(self):
        assert TaskRecord.from_dict({"id": "1"}, T0) is None
        assert TaskRecord.from_dict({"name": "A"}, T0) is None
        assert TaskRecord.from_dict({"id": "", "name": "A"}, T0) is None
        assert TaskRecord.from_dict({"id": "1", "name": "   "}, T0) is None
        assert TaskRecord.from_dict(["1", "A"], T0) is None

    def test_from_dict_integer_id_becomes_string(self):
        t = TaskRecord.from_dict({"id": 1700000000000, "name": "A"}, T0)
        assert t.id == "1700000000000"

    def test_from_dict_bool_and_float_ids_rejected(self):
        assert TaskRecord.from_dict({"id": True, "name": "A"}, T0) is None
        assert TaskRecord.from_dict({"id": 1.5, "name": "A"}, T0) is None

    def test_from_dict_minimal_fills_defaults(self):
        t = TaskRecord.from_dict({"id": "1", "name": "A"}, T0)
        assert t == TaskRecord(id="1", name="A", created_at=T0)

    def test_from_dict_completed_without_timestamp_gets_now(self):
        t = TaskRecord.from_dict({"id": "1", "name": "A", "completed": True}, T0)
        assert t.completed is True
        assert t.completed_at == T0

    def test_from_dict_incomplete_drops_stray_timestamp(self):
        t = TaskRecord.from_dict(
            {"id": "1", "name": "A", "completed": False, "completedAt": "2026-01-01T00:00:00Z"},
            T0,
        )
        assert t.completed_at is None

    def test_from_dict_invalid_date_becomes_none(self):
        t = TaskRecord.from_dict({"id": "1", "name": "A", "date": "soon"}, T0)
        assert t.due_date is None


class TestParsers:
    def test_parse_timestamp_accepts_z_suffix(self):
        assert parse_timestamp("2026-03-01T09:00:00.123Z") == datetime(
            2026, 3, 1, 9, 0, 0, 123000, tzinfo=timezone.utc
        )

    def test_parse_timestamp_rejects_garbage(self):
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None

    def test_parse_date(self):
        assert parse_date("2026-03-05") == date(2026, 3, 5)
        assert parse_date("") is None
        assert parse_date("05-03-2026") is None


class TestCollection:
    def test_duplicate_ids_rejected(self, make_task):
        with pytest.raises(ValueError):
            TaskCollection([make_task("1"), make_task("1")])

    def test_insert_front_and_remove(self, make_task):
        c = TaskCollection([make_task("1")])
        c.insert_front(make_task("2"))
        assert c.ids() == ["2", "1"]
        assert c.remove("1") is True
        assert c.remove("1") is False
        assert c.ids() == ["2"]

    def test_insert_front_duplicate_rejected(self, make_task):
        c = TaskCollection([make_task("1")])
        with pytest.raises(ValueError):
            c.insert_front(make_task("1"))

    def test_from_records_keeps_first_duplicate(self, make_task):
        c = TaskCollection.from_records([make_task("1", name="first"), make_task("1", name="second")])
        assert len(c) == 1
        assert c.get("1").name == "first"

    def test_copy_is_independent(self, make_task):
        c = TaskCollection([make_task("1")])
        dup = c.copy()
        dup.get("1").name = "changed"
        assert c.get("1").name == "Task 1"
