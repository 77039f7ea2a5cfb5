from __future__ import annotations

from datetime import datetime

import pytest

from face_attendance.attendance.repository import KeyValueAttendanceRepository
from face_attendance.attendance.service import AttendanceStore
from face_attendance.core.exceptions import StorageError
from face_attendance.persistence.file_store import FileKeyValueStore


def test_get_missing_key_returns_none(tmp_path):
    assert FileKeyValueStore(tmp_path).get("nothing") is None


def test_set_get_delete(tmp_path):
    kv = FileKeyValueStore(tmp_path / "nested")

    kv.set("records", "[1, 2]")
    assert kv.get("records") == "[1, 2]"
    assert (tmp_path / "nested" / "records.json").exists()

    kv.set("records", "[]")
    assert kv.get("records") == "[]"
    assert [p.name for p in (tmp_path / "nested").iterdir()] == ["records.json"]

    kv.delete("records")
    kv.delete("records")
    assert kv.get("records") is None


def test_rejects_path_like_keys(tmp_path):
    kv = FileKeyValueStore(tmp_path)

    with pytest.raises(StorageError):
        kv.set("../escape", "x")


def test_store_survives_restart_on_disk(tmp_path):
    now = datetime(2026, 3, 2, 9, 0, 0)
    first = AttendanceStore(KeyValueAttendanceRepository(FileKeyValueStore(tmp_path)))
    first.init()
    first.submit("alice", 0.92, now=now)

    second = AttendanceStore(KeyValueAttendanceRepository(FileKeyValueStore(tmp_path)))

    assert second.init() == 1
    assert second.get_records() == first.get_records()


def test_corrupt_file_starts_empty(tmp_path):
    (tmp_path / "facial-attendance-records.json").write_text("{{{", encoding="utf-8")

    store = AttendanceStore(KeyValueAttendanceRepository(FileKeyValueStore(tmp_path)))

    assert store.init() == 0
