from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import day_bounds, now_local, truncate_to_millis
from ..core.constants import DEFAULT_DEBOUNCE_SECONDS, DEFAULT_RECENT_LIMIT, HIGH_CONFIDENCE, MEDIUM_CONFIDENCE
from ..core.enums import ConfidenceLevel
from .codec import make_record_id
from .model import AttendanceRecord, AttendanceStats
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def confidence_level(confidence: float) -> ConfidenceLevel:
    if confidence >= HIGH_CONFIDENCE:
        return ConfidenceLevel.HIGH
    if confidence >= MEDIUM_CONFIDENCE:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


class AttendanceStore:
    """Owns the attendance records and the per-identity debounce bookkeeping.

    Records are kept newest first. Every accepted submission is persisted
    through the repository right away. The store is not thread-safe: it is
    driven by a single detection loop and read by the same thread.
    """

    def __init__(
        self,
        repository: AttendanceRepository,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._repository = repository
        self._debounce = timedelta(seconds=float(debounce_seconds))
        self._clock = clock
        self._records: list[AttendanceRecord] = []
        self._last_seen: dict[str, datetime] = {}

    @property
    def debounce_window(self) -> timedelta:
        return self._debounce

    def init(self) -> int:
        """Load persisted records and rebuild the debounce state from them."""

        self._records = list(self._repository.load())
        self._last_seen = {}
        for r in self._records:
            seen = self._last_seen.get(r.name)
            if seen is None or r.timestamp > seen:
                self._last_seen[r.name] = r.timestamp

        logger.info("Loaded %d attendance record(s) for %d identities", len(self._records), len(self._last_seen))
        return len(self._records)

    def submit(
        self,
        name: str,
        confidence: float,
        snapshot: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> bool:
        """Record a sighting unless the same identity was accepted within the debounce window.

        Callers filter out "unknown" and low-confidence matches before calling.
        Returns True when a record was added.
        """

        now = truncate_to_millis(now or self._clock())

        last = self._last_seen.get(name)
        if last is not None and now - last < self._debounce:
            return False

        record = AttendanceRecord(
            record_id=make_record_id(name, now),
            name=name,
            timestamp=now,
            confidence=float(confidence),
            image_snapshot=snapshot,
        )
        self._records.insert(0, record)
        self._last_seen[name] = now
        self._repository.save(self._records)

        logger.debug("Accepted sighting %s (confidence=%.2f)", record.record_id, record.confidence)
        return True

    def get_records(self) -> list[AttendanceRecord]:
        return list(self._records)

    def get_today_records(self, *, today: Optional[date] = None) -> list[AttendanceRecord]:
        return self._records_for_day(today or self._clock().date())

    def get_records_by_date_range(self, start: datetime, end: datetime) -> list[AttendanceRecord]:
        """Records with start <= timestamp <= end, newest first."""
        return [r for r in self._records if start <= r.timestamp <= end]

    def get_daily_attendance(self, day: Optional[date] = None) -> list[AttendanceRecord]:
        """First record per identity for the day, oldest first."""

        day_records = sorted(self._records_for_day(day or self._clock().date()), key=lambda r: r.timestamp)

        first_entries: dict[str, AttendanceRecord] = {}
        for r in day_records:
            if r.name not in first_entries:
                first_entries[r.name] = r

        return sorted(first_entries.values(), key=lambda r: r.timestamp)

    def get_activity_log(self, day: Optional[date] = None) -> list[AttendanceRecord]:
        if day is None:
            return list(self._records)
        return self._records_for_day(day)

    def get_stats(self, *, today: Optional[date] = None) -> AttendanceStats:
        today = today or self._clock().date()
        daily = self.get_daily_attendance(today)
        return AttendanceStats(
            total_records=len(self._records),
            today_records=len(self.get_today_records(today=today)),
            daily_attendance_count=len(daily),
            unique_people_today=len(daily),
            unique_people_total=len({r.name for r in self._records}),
            last_attendance=self._records[0].timestamp if self._records else None,
        )

    def clear_records(self) -> None:
        """Drop every record and all debounce state. Irreversible."""

        count = len(self._records)
        self._records = []
        self._last_seen.clear()
        self._repository.save(self._records)
        logger.warning("Cleared %d attendance record(s)", count)

    def get_recent_ui(self, *, limit: int = DEFAULT_RECENT_LIMIT) -> list[dict]:
        return [self._to_ui(r) for r in self._records[: max(int(limit), 0)]]

    def _records_for_day(self, day: date) -> list[AttendanceRecord]:
        start, end = day_bounds(day)
        return [r for r in self._records if start <= r.timestamp < end]

    def _to_ui(self, r: AttendanceRecord) -> dict:
        return {
            "id": r.record_id,
            "name": r.name,
            "date": r.timestamp.strftime("%Y-%m-%d"),
            "time": r.timestamp.strftime("%H:%M:%S"),
            "confidence": f"{r.confidence:.2f}",
            "confidence_level": confidence_level(r.confidence).value,
            "has_snapshot": r.image_snapshot is not None,
        }
