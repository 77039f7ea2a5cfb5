"""JSON layout of persisted and exported attendance records.

The payload is a single JSON array. Each element looks like::

    {"id": "alice-1760861100000", "name": "alice",
     "timestamp": "2026-10-19T09:05:00.000", "confidence": 0.92,
     "imageSnapshot": "data:image/jpeg;base64,..."}

Entries are validated one by one on decode so that a single bad element does
not cost the whole store.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..common.datetime_utils import epoch_millis, format_timestamp, parse_timestamp, truncate_to_millis
from ..core.exceptions import CorruptPayloadError
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


@dataclass
class DecodeResult:
    records: list[AttendanceRecord] = field(default_factory=list)
    rejected: int = 0


def make_record_id(name: str, timestamp) -> str:
    return f"{name}-{epoch_millis(timestamp)}"


def record_to_dict(record: AttendanceRecord) -> dict:
    out = {
        "id": record.record_id,
        "name": record.name,
        "timestamp": format_timestamp(record.timestamp),
        "confidence": record.confidence,
    }
    if record.image_snapshot is not None:
        out["imageSnapshot"] = record.image_snapshot
    return out


def encode_records(records: Iterable[AttendanceRecord], *, indent: Optional[int] = None) -> str:
    return json.dumps([record_to_dict(r) for r in records], indent=indent, ensure_ascii=False)


def record_from_dict(raw: Any) -> AttendanceRecord:
    """Build a record from one decoded JSON element.

    Raises ValueError describing the first problem found.
    """

    if not isinstance(raw, dict):
        raise ValueError(f"expected an object, got {type(raw).__name__}")

    name = raw.get("name")
    # Any string submit() accepted must load back, the empty one included.
    if not isinstance(name, str):
        raise ValueError("name must be a string")

    confidence = raw.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise ValueError("confidence must be a number")
    if not 0.0 <= float(confidence) <= 1.0:
        raise ValueError(f"confidence out of range: {confidence!r}")

    ts_raw = raw.get("timestamp")
    if not isinstance(ts_raw, str):
        raise ValueError("timestamp must be a string")
    try:
        timestamp = truncate_to_millis(parse_timestamp(ts_raw))
    except ValueError as e:
        raise ValueError(f"unparseable timestamp {ts_raw!r}") from e

    snapshot = raw.get("imageSnapshot", raw.get("imageData"))
    if snapshot is not None and not isinstance(snapshot, str):
        snapshot = None

    record_id = raw.get("id")
    if not isinstance(record_id, str) or not record_id:
        record_id = make_record_id(name, timestamp)

    return AttendanceRecord(
        record_id=record_id,
        name=name,
        timestamp=timestamp,
        confidence=float(confidence),
        image_snapshot=snapshot,
    )


def decode_records(payload: str) -> DecodeResult:
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise CorruptPayloadError(f"attendance payload is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CorruptPayloadError(f"attendance payload must be a JSON array, got {type(data).__name__}")

    result = DecodeResult()
    for index, raw in enumerate(data):
        try:
            result.records.append(record_from_dict(raw))
        except ValueError as e:
            result.rejected += 1
            logger.warning("Skipping malformed attendance record #%d: %s", index, e)
    return result
