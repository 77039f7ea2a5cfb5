from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Sequence

from face_attendance.attendance.model import AttendanceRecord
from face_attendance.attendance.service import AttendanceStore


class InMemoryAttendanceRepo:
    def __init__(self, records=None):
        self.records: list[AttendanceRecord] = list(records or [])
        self.saves = 0

    def load(self) -> list[AttendanceRecord]:
        return list(self.records)

    def save(self, records: Sequence[AttendanceRecord]) -> None:
        self.records = list(records)
        self.saves += 1


T0 = datetime(2026, 3, 2, 9, 0, 0)


def make_store(repo=None, **kwargs) -> AttendanceStore:
    store = AttendanceStore(repo or InMemoryAttendanceRepo(), clock=lambda: T0, **kwargs)
    store.init()
    return store


def test_submit_within_debounce_window_is_rejected():
    store = make_store()

    assert store.submit("alice", 0.9, now=T0) is True
    assert store.submit("alice", 0.9, now=T0 + timedelta(seconds=29, milliseconds=999)) is False

    assert len(store.get_records()) == 1


def test_submit_at_exactly_the_window_is_accepted():
    store = make_store()

    assert store.submit("alice", 0.9, now=T0) is True
    assert store.submit("alice", 0.9, now=T0 + timedelta(seconds=30)) is True


def test_debounce_is_per_identity():
    store = make_store()

    assert store.submit("alice", 0.9, now=T0) is True
    assert store.submit("bob", 0.8, now=T0 + timedelta(seconds=1)) is True


def test_rejected_submit_does_not_persist():
    repo = InMemoryAttendanceRepo()
    store = make_store(repo)

    store.submit("alice", 0.9, now=T0)
    store.submit("alice", 0.9, now=T0 + timedelta(seconds=5))

    assert repo.saves == 1
    assert len(repo.records) == 1


def test_accepted_record_fields():
    store = make_store()
    now = datetime(2026, 3, 2, 9, 0, 0, 123456)

    store.submit("alice", 0.92, "data:image/jpeg;base64,AAAA", now=now)

    rec = store.get_records()[0]
    assert rec.name == "alice"
    assert rec.timestamp == datetime(2026, 3, 2, 9, 0, 0, 123000)
    assert rec.record_id == f"alice-{int(round(rec.timestamp.timestamp() * 1000))}"
    assert rec.confidence == 0.92
    assert rec.image_snapshot == "data:image/jpeg;base64,AAAA"


def test_records_are_newest_first_and_copied():
    store = make_store()
    for i, name in enumerate(["a", "b", "c"]):
        store.submit(name, 0.9, now=T0 + timedelta(minutes=i))

    records = store.get_records()
    assert [r.name for r in records] == ["c", "b", "a"]

    records.clear()
    assert len(store.get_records()) == 3


def test_daily_attendance_keeps_first_entry_per_person():
    store = make_store()
    store.submit("A", 0.91, now=datetime(2026, 3, 2, 9, 0))
    store.submit("B", 0.80, now=datetime(2026, 3, 2, 8, 30))
    store.submit("A", 0.95, now=datetime(2026, 3, 2, 9, 5))
    store.submit("A", 0.99, now=datetime(2026, 3, 2, 14, 0))

    daily = store.get_daily_attendance(date(2026, 3, 2))

    assert [(r.name, r.timestamp) for r in daily] == [
        ("B", datetime(2026, 3, 2, 8, 30)),
        ("A", datetime(2026, 3, 2, 9, 0)),
    ]
    assert daily[1].confidence == 0.91


def test_daily_attendance_ignores_other_days():
    store = make_store()
    store.submit("A", 0.9, now=datetime(2026, 3, 1, 23, 59, 0))
    store.submit("A", 0.9, now=datetime(2026, 3, 2, 0, 0, 0))
    store.submit("A", 0.9, now=datetime(2026, 3, 3, 0, 0, 0))

    daily = store.get_daily_attendance(date(2026, 3, 2))

    assert [r.timestamp for r in daily] == [datetime(2026, 3, 2, 0, 0, 0)]


def test_today_records_use_half_open_window():
    store = make_store()
    store.submit("A", 0.9, now=datetime(2026, 3, 2, 0, 0, 0))
    store.submit("B", 0.9, now=datetime(2026, 3, 2, 23, 59, 59, 999000))
    store.submit("C", 0.9, now=datetime(2026, 3, 3, 0, 0, 0))

    today = store.get_today_records(today=date(2026, 3, 2))

    assert [r.name for r in today] == ["B", "A"]


def test_activity_log_returns_everything_without_date():
    store = make_store()
    store.submit("A", 0.9, now=datetime(2026, 3, 1, 10, 0))
    store.submit("A", 0.9, now=datetime(2026, 3, 2, 10, 0))
    store.submit("A", 0.9, now=datetime(2026, 3, 2, 11, 0))

    assert len(store.get_activity_log()) == 3
    assert [r.timestamp.hour for r in store.get_activity_log(date(2026, 3, 2))] == [11, 10]


def test_records_by_date_range_is_inclusive():
    store = make_store()
    store.submit("A", 0.9, now=datetime(2026, 3, 2, 9, 0))
    store.submit("B", 0.9, now=datetime(2026, 3, 2, 10, 0))
    store.submit("C", 0.9, now=datetime(2026, 3, 2, 11, 0))

    found = store.get_records_by_date_range(datetime(2026, 3, 2, 9, 0), datetime(2026, 3, 2, 10, 0))

    assert [r.name for r in found] == ["B", "A"]


def test_clear_resets_records_and_debounce():
    repo = InMemoryAttendanceRepo()
    store = make_store(repo)
    store.submit("alice", 0.9, now=T0)

    store.clear_records()

    assert store.get_records() == []
    assert repo.records == []
    assert store.submit("alice", 0.9, now=T0 + timedelta(seconds=1)) is True


def test_clear_is_idempotent():
    store = make_store()

    store.clear_records()
    store.clear_records()

    assert store.get_records() == []
    assert store.get_stats(today=T0.date()).last_attendance is None


def test_stats_are_consistent_with_views():
    store = make_store()
    store.submit("A", 0.9, now=datetime(2026, 3, 1, 9, 0))
    store.submit("A", 0.9, now=datetime(2026, 3, 2, 9, 0))
    store.submit("A", 0.9, now=datetime(2026, 3, 2, 10, 0))
    store.submit("B", 0.9, now=datetime(2026, 3, 2, 11, 0))
    store.submit("C", 0.9, now=datetime(2026, 2, 28, 11, 0))

    stats = store.get_stats(today=date(2026, 3, 2))

    assert stats.total_records == 5
    assert stats.today_records == 3
    assert stats.daily_attendance_count == len(store.get_daily_attendance(date(2026, 3, 2))) == 2
    assert stats.unique_people_today == stats.daily_attendance_count
    assert stats.unique_people_total == len({r.name for r in store.get_records()}) == 3
    assert stats.last_attendance == store.get_records()[0].timestamp


def test_stats_on_empty_store():
    stats = make_store().get_stats(today=T0.date())

    assert stats.total_records == 0
    assert stats.last_attendance is None
    assert stats.to_dict()["last_attendance"] is None


def test_init_rebuilds_debounce_from_persisted_records():
    repo = InMemoryAttendanceRepo()
    first = make_store(repo)
    first.submit("alice", 0.9, now=T0 - timedelta(minutes=5))
    first.submit("alice", 0.9, now=T0)

    restarted = AttendanceStore(repo)
    assert restarted.init() == 2

    assert restarted.submit("alice", 0.9, now=T0 + timedelta(seconds=10)) is False
    assert restarted.submit("alice", 0.9, now=T0 + timedelta(seconds=30)) is True


def test_empty_name_is_treated_as_an_identity():
    store = make_store()

    assert store.submit("", 0.5, now=T0) is True
    assert store.submit("", 0.5, now=T0 + timedelta(seconds=1)) is False


def test_custom_debounce_window():
    store = make_store(debounce_seconds=5)

    assert store.submit("alice", 0.9, now=T0) is True
    assert store.submit("alice", 0.9, now=T0 + timedelta(seconds=5)) is True


def test_recent_ui_rows():
    store = make_store()
    store.submit("alice", 0.85, now=datetime(2026, 3, 2, 9, 0, 5))
    store.submit("bob", 0.65, now=datetime(2026, 3, 2, 9, 1, 0))
    store.submit("carol", 0.45, now=datetime(2026, 3, 2, 9, 2, 0))

    rows = store.get_recent_ui(limit=2)

    assert [r["name"] for r in rows] == ["carol", "bob"]
    assert rows[0]["confidence_level"] == "low"
    assert rows[1]["confidence_level"] == "medium"
    assert rows[1]["time"] == "09:01:00"
    assert store.get_recent_ui()[2]["confidence_level"] == "high"


def test_end_to_end_scenario():
    store = make_store()

    assert store.submit("alice", 0.92, now=T0) is True
    assert store.submit("alice", 0.95, now=T0 + timedelta(seconds=10)) is False
    assert store.submit("alice", 0.90, now=T0 + timedelta(seconds=31)) is True

    alice = [r for r in store.get_records() if r.name == "alice"]
    assert len(alice) == 2

    daily = store.get_daily_attendance(T0.date())
    assert len(daily) == 1
    assert daily[0].confidence == 0.92
    assert daily[0].timestamp == T0
