"""Wires the store, camera, detector and flows together from configuration."""

import logging
from typing import Optional

from .auth import RegistrationFlow, ScanFlow, UnavailablePolicy
from .auth.flow import RedirectHandler
from .camera import MAIN_VIEW, REGISTRATION_VIEW, CameraConfig, CameraSwitcher
from .constants import Config, get_config
from .detection import BaseSignalDetector, SignalDetector
from .matching import create_matcher
from .members import JsonFileStorage, KeyValueStorage, MemberRecord, MemberStore

logger = logging.getLogger(__name__)

CAMERA_DENIED_MESSAGE = "Error: Camera Access Denied"


class FaceIdSession:
    """One login kiosk: member store, camera views, scan and registration."""

    def __init__(
        self,
        store: MemberStore,
        scan_flow: ScanFlow,
        registration: RegistrationFlow,
        camera: Optional[CameraSwitcher] = None,
    ):
        self.store = store
        self.scan_flow = scan_flow
        self.registration = registration
        self.camera = camera

    @classmethod
    def from_config(
        cls,
        config: Optional[Config] = None,
        storage: Optional[KeyValueStorage] = None,
        detector: Optional[BaseSignalDetector] = None,
        use_camera: bool = True,
        policy: Optional[UnavailablePolicy] = None,
        redirect_handler: Optional[RedirectHandler] = None,
    ) -> "FaceIdSession":
        """Build a session.

        Args:
            config: Configuration (global config if None)
            storage: Member namespace (JSON file from config if None)
            detector: Signal detector (configured backend if None)
            use_camera: Capture frames from the configured cameras
            policy: Overrides the configured unavailable policy
            redirect_handler: Called with the redirect URL on grant
        """
        config = config or get_config()

        if storage is None:
            storage = JsonFileStorage(config.storage.path)
        store = MemberStore(storage, key=config.storage.members_key)

        if detector is None:
            detection = config.detection
            detector = SignalDetector(detection.backend, **detection.backend_kwargs())

        camera = None
        if use_camera:
            settings = config.camera
            camera = CameraSwitcher({
                MAIN_VIEW: CameraConfig(
                    device=settings.main_device,
                    width=settings.width,
                    height=settings.height,
                    fps=settings.fps,
                ),
                REGISTRATION_VIEW: CameraConfig(
                    device=settings.registration_device,
                    width=settings.width,
                    height=settings.height,
                    fps=settings.fps,
                ),
            })

        scan_flow = ScanFlow(
            store,
            detector=detector,
            matcher=create_matcher(config.auth.matcher),
            scan_config=config.scan,
            auth_config=config.auth,
            policy=policy,
            frame_source=camera.read_image if camera is not None else None,
            redirect_handler=redirect_handler,
        )
        registration = RegistrationFlow(store, config.registration, camera=camera)
        logger.info(
            f"Session ready: {len(store)} member(s), "
            f"detector={getattr(detector, 'name', type(detector).__name__)}, "
            f"policy={scan_flow.policy.value}"
        )
        return cls(store, scan_flow, registration, camera)

    def start(self) -> bool:
        """Open the main camera, disabling scans if it cannot be opened.

        Returns:
            True if scanning is available
        """
        if self.camera is None:
            self.scan_flow.enable()
            return True

        if self.camera.switch_to(MAIN_VIEW):
            self.scan_flow.enable()
            return True

        self.scan_flow.disable(CAMERA_DENIED_MESSAGE)
        return False

    def open_registration(self) -> bool:
        """Switch to the registration view."""
        return self.registration.open()

    def close_registration(self) -> bool:
        """Return to the main view and refresh scan availability."""
        return self.start()

    async def register(self, name: str) -> Optional[MemberRecord]:
        """Run the registration flow, then go back to the main view.

        Returns:
            The new record, or None if the registration did not happen
        """
        if self.registration.is_saving:
            return None
        try:
            return await self.registration.save(name)
        finally:
            self.close_registration()

    def close(self) -> None:
        """Release the camera."""
        if self.camera is not None:
            self.camera.close()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
