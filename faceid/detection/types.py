"""Detection data types."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple


class DetectionSignal(Enum):
    """Outcome of probing a frame for a face.

    - PRESENT: at least one face-like region was found
    - ABSENT: the detector ran and found nothing
    - UNAVAILABLE: no detector, no frame, or the detector failed
    """
    PRESENT = "present"
    ABSENT = "absent"
    UNAVAILABLE = "unavailable"

    @classmethod
    def combine(cls, signals: Iterable["DetectionSignal"]) -> "DetectionSignal":
        """Aggregate samples: any PRESENT wins, then any UNAVAILABLE."""
        seen = set(signals)
        if cls.PRESENT in seen:
            return cls.PRESENT
        if cls.UNAVAILABLE in seen or not seen:
            return cls.UNAVAILABLE
        return cls.ABSENT


@dataclass
class DetectedFace:
    """Represents a detected face bounding box."""

    x: int
    y: int
    width: int
    height: int
    confidence: float = 1.0

    @property
    def bbox(self) -> Tuple[int, int, int, int]:
        """Return bounding box as (x, y, w, h)."""
        return (self.x, self.y, self.width, self.height)

    @property
    def center(self) -> Tuple[int, int]:
        """Return center point of bounding box."""
        return (self.x + self.width // 2, self.y + self.height // 2)
