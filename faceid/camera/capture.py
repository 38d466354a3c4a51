"""Camera capture and view switching."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)

MAIN_VIEW = "main"
REGISTRATION_VIEW = "registration"


@dataclass
class CameraConfig:
    """Camera configuration."""
    device: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class Frame:
    """A captured frame with metadata."""
    image: np.ndarray
    timestamp: float
    frame_number: int

    @property
    def height(self) -> int:
        return self.image.shape[0]

    @property
    def width(self) -> int:
        return self.image.shape[1]


class Camera:
    """OpenCV camera wrapper."""

    def __init__(self, config: Optional[CameraConfig] = None):
        """Initialize camera.

        Args:
            config: Camera configuration (uses defaults if None)
        """
        self.config = config or CameraConfig()

        self._capture = None
        self._is_open = False
        self._frame_count = 0

    def open(self) -> bool:
        """Open camera for capture.

        Returns:
            True if camera opened successfully
        """
        if self._is_open:
            return True

        try:
            self._capture = cv2.VideoCapture(self.config.device)

            if not self._capture.isOpened():
                logger.error(f"Failed to open camera device {self.config.device}")
                self._capture.release()
                self._capture = None
                return False

            self._capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
            self._capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
            self._capture.set(cv2.CAP_PROP_FPS, self.config.fps)

            self._is_open = True
            logger.info(f"Opened camera: {self.config.device}")
            return True

        except cv2.error as e:
            logger.error(f"Error opening camera: {e}")
            return False

    def close(self):
        """Close camera and release resources."""
        if self._capture is not None:
            self._capture.release()
            self._capture = None
        if self._is_open:
            logger.info("Camera closed")
        self._is_open = False

    def read(self) -> Optional[Frame]:
        """Read a single frame from the camera.

        Returns:
            Frame object or None if read failed
        """
        if not self._is_open:
            return None

        ret, image = self._capture.read()
        if not ret or image is None:
            logger.debug("Camera returned no frame")
            return None

        self._frame_count += 1
        return Frame(
            image=image,
            timestamp=time.time(),
            frame_number=self._frame_count,
        )

    @property
    def is_open(self) -> bool:
        """Check if camera is open."""
        return self._is_open

    @property
    def frame_count(self) -> int:
        """Get total frames captured."""
        return self._frame_count

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class CameraSwitcher:
    """Keeps at most one camera stream open across named views.

    Switching to another view releases the current stream before the
    new one is opened.
    """

    def __init__(
        self,
        configs: Dict[str, CameraConfig],
        factory: Callable[[CameraConfig], Camera] = Camera,
    ):
        """Initialize the switcher.

        Args:
            configs: Camera configuration per view name
            factory: Builds a camera for a configuration
        """
        self._configs = dict(configs)
        self._factory = factory
        self._active_view: Optional[str] = None
        self._camera: Optional[Camera] = None

    @property
    def active_view(self) -> Optional[str]:
        return self._active_view

    @property
    def camera(self) -> Optional[Camera]:
        return self._camera

    def switch_to(self, view: str) -> bool:
        """Make view the active one.

        Returns:
            True if the view's camera is open
        """
        if view not in self._configs:
            raise ValueError(
                f"Unknown view: {view}. Available: {list(self._configs.keys())}"
            )

        if view == self._active_view and self._camera is not None and self._camera.is_open:
            return True

        self.close()
        camera = self._factory(self._configs[view])
        self._active_view = view
        if not camera.open():
            return False

        self._camera = camera
        logger.debug(f"Switched camera to {view} view")
        return True

    def read_image(self) -> Optional[np.ndarray]:
        """Image from the active view, or None."""
        if self._camera is None:
            return None
        frame = self._camera.read()
        return frame.image if frame is not None else None

    def close(self):
        """Release the active camera."""
        if self._camera is not None:
            self._camera.close()
            self._camera = None
        self._active_view = None
