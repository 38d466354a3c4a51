"""Haar Cascade face-signal detector."""

import logging
from typing import List, Optional, Tuple

import cv2
import numpy as np

from .base import BaseSignalDetector
from .types import DetectedFace, DetectionSignal

logger = logging.getLogger(__name__)


class HaarCascadeSignalDetector(BaseSignalDetector):
    """Face-signal detector using OpenCV Haar Cascades."""

    name = "haar_cascade"

    def __init__(
        self,
        scale_factor: float = 1.1,
        min_neighbors: int = 5,
        min_size: Tuple[int, int] = (30, 30),
    ):
        """Initialize Haar Cascade detector.

        Args:
            scale_factor: Scale factor for multi-scale detection
            min_neighbors: Minimum neighbors for detection
            min_size: Minimum face size to detect
        """
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = tuple(min_size)

        # Load pre-trained cascade
        cascade_path = cv2.data.haarcascades + "haarcascade_frontalface_default.xml"  # type: ignore
        self.cascade = cv2.CascadeClassifier(cascade_path)

        if self.cascade.empty():
            raise RuntimeError(f"Failed to load cascade from {cascade_path}")

    def detect_faces(self, image: np.ndarray) -> List[DetectedFace]:
        """Detect face boxes using Haar Cascade."""
        # Convert to grayscale
        if len(image.shape) == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image

        faces = self.cascade.detectMultiScale(
            gray,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size,
        )

        return [
            DetectedFace(x=int(x), y=int(y), width=int(w), height=int(h))
            for (x, y, w, h) in faces
        ]

    def probe(self, frame: Optional[np.ndarray]) -> DetectionSignal:
        """Report whether the frame contains a face."""
        if frame is None or frame.size == 0:
            return DetectionSignal.UNAVAILABLE

        try:
            faces = self.detect_faces(frame)
        except cv2.error as e:
            logger.warning(f"Haar detection failed: {e}")
            return DetectionSignal.UNAVAILABLE

        return DetectionSignal.PRESENT if faces else DetectionSignal.ABSENT
