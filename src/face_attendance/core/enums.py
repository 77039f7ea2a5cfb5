from __future__ import annotations

from enum import Enum


class ExportKind(str, Enum):
    """Export file prefix, also used to build download filenames."""

    ACTIVITY_LOG = "activity-log"
    DAILY_ATTENDANCE = "daily-attendance"
    ATTENDANCE = "attendance"


class ConfidenceLevel(str, Enum):
    """Display band for a match confidence."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class StorageBackend(str, Enum):
    FILE = "file"
    MYSQL = "mysql"
