from __future__ import annotations

import csv
import io
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_local
from ..core.enums import ExportKind
from .codec import encode_records
from .model import AttendanceRecord, ExportFile
from .service import AttendanceStore

ACTIVITY_LOG_HEADERS = ("ID", "Name", "Date", "Time", "Confidence")
DAILY_ATTENDANCE_HEADERS = ("Name", "First Entry Time", "Date", "Confidence")

CSV_MIMETYPE = "text/csv; charset=utf-8"
JSON_MIMETYPE = "application/json; charset=utf-8"


def _date(r: AttendanceRecord) -> str:
    return r.timestamp.strftime("%Y-%m-%d")


def _time(r: AttendanceRecord) -> str:
    return r.timestamp.strftime("%H:%M:%S")


def _confidence(r: AttendanceRecord) -> Decimal:
    # Decimal keeps two places and is written unquoted under QUOTE_NONNUMERIC.
    return Decimal(f"{r.confidence:.2f}")


def _csv(headers: Iterable[str], rows: Iterable[Iterable]) -> str:
    """Header line as-is, text fields of every row double-quoted."""

    out = io.StringIO()
    csv.writer(out, lineterminator="\n").writerow(headers)
    writer = csv.writer(out, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for row in rows:
        writer.writerow(row)
    return out.getvalue()


def export_filename(kind: ExportKind, day: date, ext: str) -> str:
    return f"{kind.value}-{day.strftime('%Y-%m-%d')}.{ext}"


class AttendanceExportService:
    """Read-only CSV/JSON renderings of the store's current state."""

    def __init__(self, store: AttendanceStore, *, clock: Callable = now_local):
        self._store = store
        self._clock = clock

    def activity_log_csv(self, day: Optional[date] = None) -> str:
        rows = (
            (r.record_id, r.name, _date(r), _time(r), _confidence(r))
            for r in self._store.get_activity_log(day)
        )
        return _csv(ACTIVITY_LOG_HEADERS, rows)

    def daily_attendance_csv(self, day: Optional[date] = None) -> str:
        rows = (
            (r.name, _time(r), _date(r), _confidence(r))
            for r in self._store.get_daily_attendance(day)
        )
        return _csv(DAILY_ATTENDANCE_HEADERS, rows)

    def records_json(self) -> str:
        return encode_records(self._store.get_records(), indent=2)

    def download_activity_log_csv(self, day: Optional[date] = None, *, filename: Optional[str] = None) -> ExportFile:
        target = day or self._clock().date()
        return ExportFile(
            filename=filename or export_filename(ExportKind.ACTIVITY_LOG, target, "csv"),
            content=self.activity_log_csv(day),
            mimetype=CSV_MIMETYPE,
        )

    def download_daily_attendance_csv(self, day: Optional[date] = None, *, filename: Optional[str] = None) -> ExportFile:
        target = day or self._clock().date()
        return ExportFile(
            filename=filename or export_filename(ExportKind.DAILY_ATTENDANCE, target, "csv"),
            content=self.daily_attendance_csv(target),
            mimetype=CSV_MIMETYPE,
        )

    def download_json(self, day: Optional[date] = None, *, filename: Optional[str] = None) -> ExportFile:
        target = day or self._clock().date()
        return ExportFile(
            filename=filename or export_filename(ExportKind.ATTENDANCE, target, "json"),
            content=self.records_json(),
            mimetype=JSON_MIMETYPE,
        )
