from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FaceRegion:
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Detection:
    """One matched face from a detection tick.

    ``distance`` is the matcher's descriptor distance to the best labeled
    face; ``label`` is "unknown" when nothing matched.
    """

    label: str
    distance: float
    face_region: Optional[FaceRegion] = None
    snapshot: Optional[str] = None

    @property
    def confidence(self) -> float:
        return min(max(1.0 - float(self.distance), 0.0), 1.0)
