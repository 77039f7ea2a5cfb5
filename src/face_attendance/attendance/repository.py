from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ..core.constants import DEFAULT_STORAGE_KEY
from ..core.exceptions import CorruptPayloadError, StorageError
from ..persistence.base import KeyValueStore
from .codec import decode_records, encode_records
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


class AttendanceRepository(Protocol):
    def load(self) -> list[AttendanceRecord]:
        raise NotImplementedError

    def save(self, records: Sequence[AttendanceRecord]) -> None:
        raise NotImplementedError


class KeyValueAttendanceRepository(AttendanceRepository):
    """Keeps the whole record list as one JSON array under a single key.

    Persistence is best-effort: read failures start the store empty and write
    failures are logged, never raised.
    """

    def __init__(self, store: KeyValueStore, *, key: str = DEFAULT_STORAGE_KEY):
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[AttendanceRecord]:
        try:
            payload = self._store.get(self._key)
        except StorageError:
            logger.exception("Error loading attendance records from key %r", self._key)
            return []

        if payload is None:
            return []

        try:
            result = decode_records(payload)
        except CorruptPayloadError as e:
            logger.error("Discarding stored attendance records under %r: %s", self._key, e)
            return []

        if result.rejected:
            logger.warning("Skipped %d malformed attendance record(s) under %r", result.rejected, self._key)
        return result.records

    def save(self, records: Sequence[AttendanceRecord]) -> None:
        try:
            self._store.set(self._key, encode_records(records))
        except StorageError:
            logger.exception("Error saving attendance records to key %r", self._key)
