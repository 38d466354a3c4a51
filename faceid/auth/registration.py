"""Simulated member enrolment."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..camera import REGISTRATION_VIEW, CameraSwitcher
from ..constants import RegistrationConfig
from ..members import MemberRecord, MemberStore
from .status import StatusPublisher

logger = logging.getLogger(__name__)

EMPTY_NAME_WARNING = "Please enter a name."
REGISTERED_MESSAGE = "Member Registered. Ready to Scan."
SAVE_FAILED_MESSAGE = "Error: Could not save member"


class RegistrationFlow(StatusPublisher):
    """Registers a member after a fake capture delay.

    Returning to the main view is left to the owner of the camera
    (see FaceIdSession.close_registration).
    """

    def __init__(
        self,
        store: MemberStore,
        config: Optional[RegistrationConfig] = None,
        camera: Optional[CameraSwitcher] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        super().__init__()
        self._store = store
        self._config = config or RegistrationConfig()
        self._camera = camera
        self._sleep = sleep
        self._saving = False

    @property
    def is_saving(self) -> bool:
        return self._saving

    def open(self) -> bool:
        """Switch the camera to the registration view."""
        if self._camera is None:
            return False
        opened = self._camera.switch_to(REGISTRATION_VIEW)
        if not opened:
            self._publish("Registration camera unavailable", "warning")
        return opened

    async def save(self, name: str) -> Optional[MemberRecord]:
        """Register name after the simulated capture.

        Returns:
            The new record, or None for an empty name, a failed write, or
            while another save is in progress
        """
        if self._saving:
            logger.debug("Ignoring save while a registration is in progress")
            return None

        name = (name or "").strip()
        if not name:
            self._publish(EMPTY_NAME_WARNING, "warning")
            logger.warning("Registration attempted without a name")
            return None

        self._saving = True
        try:
            self._publish("Scanning...", "info")
            await self._sleep(self._config.capture_delay)

            try:
                record = self._store.register(name)
            except Exception as e:
                logger.error(f"Failed to save member {name}: {e}")
                self._publish(SAVE_FAILED_MESSAGE, "error")
                return None

            self._publish("Saved!", "success")
            await self._sleep(self._config.saved_delay)
        finally:
            self._saving = False

        self._publish(REGISTERED_MESSAGE, "success")
        return record
