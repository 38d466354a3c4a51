"""Camera capture for the main and registration views."""

from .capture import (
    Camera,
    CameraConfig,
    CameraSwitcher,
    Frame,
    MAIN_VIEW,
    REGISTRATION_VIEW,
)

__all__ = [
    "Camera",
    "CameraConfig",
    "CameraSwitcher",
    "Frame",
    "MAIN_VIEW",
    "REGISTRATION_VIEW",
]
