"""Example: drive the store from a detection loop (no Flask).

Goal: show that the recognition pipeline only talks to DetectionIntake, and
the store does debounce and aggregation.
"""

from datetime import datetime, timedelta

from face_attendance.container import build_container
from face_attendance.main import load_settings
from face_attendance.recognition.model import Detection


def main():
    container = build_container(settings=load_settings())
    intake = container.detection_intake

    t0 = datetime.now()
    ticks = [
        (t0, [Detection("alice", 0.08), Detection("unknown", 0.7)]),
        (t0 + timedelta(seconds=10), [Detection("alice", 0.05), Detection("bob", 0.3)]),
        (t0 + timedelta(seconds=31), [Detection("alice", 0.10)]),
    ]
    for now, detections in ticks:
        print(now.strftime("%H:%M:%S"), intake.process(detections, now=now))

    print(container.attendance_store.get_stats().to_dict())
    print(container.export_service.daily_attendance_csv())


if __name__ == "__main__":
    main()
