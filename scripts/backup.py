"""Backup attendance records.

Note: Writes the JSON export of the configured store into ./backups, the same
payload as the /export/attendance.json download.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from face_attendance.container import build_container
from face_attendance.main import load_settings


def main() -> None:
    container = build_container(settings=load_settings())

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"attendance_{ts}.json"
    out_file.write_text(container.export_service.records_json(), encoding="utf-8")

    print(f"OK: Backup created: {out_file} ({len(container.attendance_store.get_records())} records)")


if __name__ == "__main__":
    main()
