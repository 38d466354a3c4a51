"""Face-signal detection backends.

Available backends:
- haar_cascade: OpenCV Haar Cascades (default)
- present / absent: fixed signals for demos without a camera
- none: no detection capability (always UNAVAILABLE)
"""

from .types import DetectedFace, DetectionSignal
from .base import BaseSignalDetector
from .haar import HaarCascadeSignalDetector
from .static import StaticSignalDetector
from .detector import SignalDetector

DETECTION_BACKENDS = SignalDetector.BACKENDS

__all__ = [
    "DetectedFace",
    "DetectionSignal",
    "BaseSignalDetector",
    "HaarCascadeSignalDetector",
    "StaticSignalDetector",
    "SignalDetector",
    "DETECTION_BACKENDS",
]
