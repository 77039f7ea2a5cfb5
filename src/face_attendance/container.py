from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from .attendance.export import AttendanceExportService
from .attendance.repository import KeyValueAttendanceRepository
from .attendance.service import AttendanceStore
from .core.constants import DEFAULT_DEBOUNCE_SECONDS, DEFAULT_MIN_MATCH_CONFIDENCE, DEFAULT_STORAGE_KEY
from .core.enums import StorageBackend
from .database.connection import DBConfig, DatabaseConnection
from .persistence.base import KeyValueStore
from .persistence.file_store import FileKeyValueStore
from .persistence.mysql_store import MySQLKeyValueStore
from .recognition.intake import DetectionIntake


@dataclass(frozen=True)
class Container:
    kv_store: KeyValueStore
    attendance_repo: KeyValueAttendanceRepository

    attendance_store: AttendanceStore
    export_service: AttendanceExportService
    detection_intake: DetectionIntake


def build_kv_store(settings: Mapping[str, Any]) -> KeyValueStore:
    backend = StorageBackend(str(settings.get("STORAGE_BACKEND", StorageBackend.FILE.value)).lower())
    if backend is StorageBackend.MYSQL:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(settings["DB_CONFIG"]))
        return MySQLKeyValueStore(conn)
    return FileKeyValueStore(Path(settings.get("DATA_DIR", "data")))


def build_container(*, settings: Mapping[str, Any], kv_store: Optional[KeyValueStore] = None) -> Container:
    """Wire the application. The store is loaded from persistence before it is returned."""

    kv_store = kv_store or build_kv_store(settings)
    attendance_repo = KeyValueAttendanceRepository(
        kv_store,
        key=str(settings.get("STORAGE_KEY", DEFAULT_STORAGE_KEY)),
    )

    attendance_store = AttendanceStore(
        attendance_repo,
        debounce_seconds=float(settings.get("DEBOUNCE_SECONDS", DEFAULT_DEBOUNCE_SECONDS)),
    )
    attendance_store.init()

    export_service = AttendanceExportService(attendance_store)
    detection_intake = DetectionIntake(
        attendance_store,
        min_confidence=float(settings.get("MIN_MATCH_CONFIDENCE", DEFAULT_MIN_MATCH_CONFIDENCE)),
    )

    return Container(
        kv_store=kv_store,
        attendance_repo=attendance_repo,
        attendance_store=attendance_store,
        export_service=export_service,
        detection_intake=detection_intake,
    )
