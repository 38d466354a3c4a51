"""Unified face-signal detector with configurable backend."""

from typing import List, Optional, Tuple

import cv2
import numpy as np

from .base import BaseSignalDetector
from .haar import HaarCascadeSignalDetector
from .static import StaticSignalDetector
from .types import DetectedFace, DetectionSignal


class SignalDetector(BaseSignalDetector):
    """Main face-signal detector with configurable backend.

    Default backend is haar_cascade, which ships with opencv-python.
    The "none" backend models a platform without any detection capability.
    """

    BACKENDS = {
        "haar_cascade": HaarCascadeSignalDetector,
        "present": lambda **kwargs: StaticSignalDetector(DetectionSignal.PRESENT),
        "absent": lambda **kwargs: StaticSignalDetector(DetectionSignal.ABSENT),
        "none": lambda **kwargs: StaticSignalDetector(DetectionSignal.UNAVAILABLE),
    }

    def __init__(self, backend: str = "haar_cascade", **kwargs):
        """Initialize detector with specified backend.

        Args:
            backend: Detection backend to use (default: haar_cascade)
            **kwargs: Additional arguments for the detector
        """
        if backend not in self.BACKENDS:
            raise ValueError(
                f"Unknown backend: {backend}. "
                f"Available: {list(self.BACKENDS.keys())}"
            )

        self.backend_name = backend
        self.detector = self.BACKENDS[backend](**kwargs)

    @property
    def name(self) -> str:
        return self.backend_name

    def probe(self, frame: Optional[np.ndarray]) -> DetectionSignal:
        """Probe a frame for a face."""
        return self.detector.probe(frame)

    def detect_faces(self, image: np.ndarray) -> List[DetectedFace]:
        """Face boxes for backends that localize faces, else an empty list."""
        if isinstance(self.detector, HaarCascadeSignalDetector):
            return self.detector.detect_faces(image)
        return []

    def draw_detections(
        self,
        image: np.ndarray,
        faces: List[DetectedFace],
        color: Tuple[int, int, int] = (0, 255, 0),
        thickness: int = 2,
    ) -> np.ndarray:
        """Draw detection boxes on image."""
        output = image.copy()

        for face in faces:
            cv2.rectangle(
                output,
                (face.x, face.y),
                (face.x + face.width, face.y + face.height),
                color,
                thickness,
            )

        return output

    @classmethod
    def available_backends(cls) -> List[str]:
        """Return list of available detection backends."""
        return list(cls.BACKENDS.keys())
