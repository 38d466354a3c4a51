"""Base face-signal detector interface."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .types import DetectionSignal


class BaseSignalDetector(ABC):
    """Abstract base class for face-signal detectors."""

    name = "base"

    @abstractmethod
    def probe(self, frame: Optional[np.ndarray]) -> DetectionSignal:
        """Check a frame for a face.

        Args:
            frame: BGR image as numpy array, or None if no frame is available

        Returns:
            DetectionSignal for this frame
        """
        pass
