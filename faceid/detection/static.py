"""Detector that always reports the same signal."""

from typing import Optional

import numpy as np

from .base import BaseSignalDetector
from .types import DetectionSignal


class StaticSignalDetector(BaseSignalDetector):
    """Returns a fixed signal regardless of the frame.

    Used when no detection capability exists (UNAVAILABLE) and for demos
    without a camera.
    """

    name = "static"

    def __init__(self, signal: DetectionSignal = DetectionSignal.UNAVAILABLE):
        self.signal = DetectionSignal(signal)

    def probe(self, frame: Optional[np.ndarray]) -> DetectionSignal:
        return self.signal
