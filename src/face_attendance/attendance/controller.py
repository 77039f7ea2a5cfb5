from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_timestamp, parse_iso_date
from ..common.validators import require_confidence, require_non_empty
from ..core.constants import DEFAULT_RECENT_LIMIT
from ..core.exceptions import ValidationError
from ..container import Container
from ..recognition.model import Detection, FaceRegion
from .model import AttendanceRecord, ExportFile

logger = logging.getLogger(__name__)


def _parse_date_arg(name: str = "date") -> Optional[date]:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be formatted as YYYY-MM-DD") from None


def _parse_limit() -> int:
    value = request.args.get("limit")
    if not value:
        return DEFAULT_RECENT_LIMIT
    try:
        limit = int(value)
    except ValueError:
        raise ValidationError("limit must be an integer") from None
    if limit < 0:
        raise ValidationError("limit must not be negative")
    return limit


def _record_json(r: AttendanceRecord) -> dict:
    # Snapshots can be large; the JSON export carries them.
    return {
        "id": r.record_id,
        "name": r.name,
        "timestamp": format_timestamp(r.timestamp),
        "confidence": r.confidence,
    }


def _parse_detection(raw) -> Detection:
    if not isinstance(raw, dict):
        raise ValidationError("each detection must be an object")

    label = require_non_empty(raw.get("label"), "label")
    if "distance" in raw:
        distance = require_confidence(raw.get("distance"), "distance")
    else:
        distance = 1.0 - require_confidence(raw.get("confidence"), "confidence")

    region = None
    box = raw.get("box")
    if isinstance(box, dict):
        try:
            region = FaceRegion(
                x=int(box["x"]),
                y=int(box["y"]),
                width=int(box["width"]),
                height=int(box["height"]),
            )
        except (KeyError, TypeError, ValueError):
            raise ValidationError("box must have numeric x, y, width and height") from None

    snapshot = raw.get("snapshot")
    return Detection(
        label=label,
        distance=distance,
        face_region=region,
        snapshot=snapshot if isinstance(snapshot, str) else None,
    )


def register(app: Flask, container: Container) -> None:
    store = container.attendance_store
    exports = container.export_service

    def json_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except Exception:
                logger.exception("Unhandled error in %s", request.path)
                return jsonify({"success": False, "message": "Internal error"}), 500

        return wrapper

    def _send(export: ExportFile):
        # BOM on CSV so Excel detects UTF-8.
        encoding = "utf-8-sig" if export.mimetype.startswith("text/csv") else "utf-8"
        return app.response_class(
            export.content.encode(encoding),
            mimetype=export.mimetype,
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_recent")
    @json_errors
    def attendance_recent():
        return jsonify({"success": True, "records": store.get_recent_ui(limit=_parse_limit())})

    @app.route("/api/attendance/records", methods=["GET"], endpoint="attendance_records")
    @json_errors
    def attendance_records():
        return jsonify({"success": True, "records": [_record_json(r) for r in store.get_records()]})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @json_errors
    def attendance_today():
        return jsonify({"success": True, "records": [_record_json(r) for r in store.get_today_records()]})

    @app.route("/api/attendance/daily", methods=["GET"], endpoint="attendance_daily")
    @json_errors
    def attendance_daily():
        day = _parse_date_arg()
        return jsonify({"success": True, "records": [_record_json(r) for r in store.get_daily_attendance(day)]})

    @app.route("/api/attendance/activity", methods=["GET"], endpoint="attendance_activity")
    @json_errors
    def attendance_activity():
        day = _parse_date_arg()
        return jsonify({"success": True, "records": [_record_json(r) for r in store.get_activity_log(day)]})

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @json_errors
    def attendance_stats():
        return jsonify({"success": True, "stats": store.get_stats().to_dict()})

    @app.route("/api/attendance/detections", methods=["POST"], endpoint="attendance_detections")
    @json_errors
    def attendance_detections():
        data = request.get_json(silent=True)
        if isinstance(data, dict):
            data = data.get("detections")
        if not isinstance(data, list):
            raise ValidationError("detections must be a list")

        detections = [_parse_detection(raw) for raw in data]
        accepted = container.detection_intake.process(detections)
        return jsonify({"success": True, "accepted": accepted})

    @app.route("/api/attendance/submit", methods=["POST"], endpoint="attendance_submit")
    @json_errors
    def attendance_submit():
        data = request.get_json(silent=True) or {}
        name = require_non_empty(data.get("name"), "name")
        confidence = require_confidence(data.get("confidence"))
        snapshot = data.get("snapshot")

        accepted = store.submit(name, confidence, snapshot if isinstance(snapshot, str) else None)
        return jsonify({"success": True, "accepted": accepted})

    @app.route("/api/attendance/clear", methods=["POST"], endpoint="attendance_clear")
    @json_errors
    def attendance_clear():
        data = request.get_json(silent=True) or {}
        if data.get("confirm") is not True:
            raise ValidationError("Clearing attendance records requires confirm=true")

        store.clear_records()
        return jsonify({"success": True})

    @app.route("/export/activity-log.csv", methods=["GET"], endpoint="export_activity_log")
    @json_errors
    def export_activity_log():
        return _send(exports.download_activity_log_csv(_parse_date_arg()))

    @app.route("/export/daily-attendance.csv", methods=["GET"], endpoint="export_daily_attendance")
    @json_errors
    def export_daily_attendance():
        return _send(exports.download_daily_attendance_csv(_parse_date_arg()))

    @app.route("/export/attendance.json", methods=["GET"], endpoint="export_json")
    @json_errors
    def export_json():
        return _send(exports.download_json(_parse_date_arg()))
