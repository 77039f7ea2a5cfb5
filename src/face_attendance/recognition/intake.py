from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from ..attendance.service import AttendanceStore
from ..core.constants import DEFAULT_MIN_MATCH_CONFIDENCE, UNKNOWN_IDENTITY
from .model import Detection

logger = logging.getLogger(__name__)


class DetectionIntake:
    """Confidence gate between the recognition pipeline and the store.

    Only labelled matches with confidence strictly above ``min_confidence``
    reach ``AttendanceStore.submit``; the store applies its own debounce.
    """

    def __init__(self, store: AttendanceStore, *, min_confidence: float = DEFAULT_MIN_MATCH_CONFIDENCE):
        self._store = store
        self._min_confidence = float(min_confidence)

    @property
    def min_confidence(self) -> float:
        return self._min_confidence

    def accepts(self, detection: Detection) -> bool:
        label = (detection.label or "").strip()
        if not label or label.lower() == UNKNOWN_IDENTITY:
            return False
        return detection.confidence > self._min_confidence

    def process(self, detections: Iterable[Detection], *, now: Optional[datetime] = None) -> list[str]:
        """Submit one tick's detections; return the names the store accepted."""

        accepted: list[str] = []
        for d in detections:
            if not self.accepts(d):
                continue
            name = d.label.strip()
            if self._store.submit(name, d.confidence, d.snapshot, now=now):
                accepted.append(name)

        if accepted:
            logger.info("Attendance recorded for: %s", ", ".join(accepted))
        return accepted
