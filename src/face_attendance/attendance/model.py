from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_timestamp


@dataclass(frozen=True)
class AttendanceRecord:
    """A single accepted sighting of a recognized identity."""

    record_id: str
    name: str
    timestamp: datetime
    confidence: float
    image_snapshot: Optional[str] = None


@dataclass(frozen=True)
class AttendanceStats:
    """Aggregate counters shown next to the attendance list."""

    total_records: int
    today_records: int
    daily_attendance_count: int
    unique_people_today: int
    unique_people_total: int
    last_attendance: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "total_records": self.total_records,
            "today_records": self.today_records,
            "daily_attendance_count": self.daily_attendance_count,
            "unique_people_today": self.unique_people_today,
            "unique_people_total": self.unique_people_total,
            "last_attendance": format_timestamp(self.last_attendance) if self.last_attendance else None,
        }


@dataclass(frozen=True)
class ExportFile:
    """Rendered export ready to be sent as a download."""

    filename: str
    content: str
    mimetype: str
