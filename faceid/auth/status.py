"""Status listeners shared by the flows."""

import logging
from typing import Callable, List, Optional

from .types import ScanState, StatusEvent

logger = logging.getLogger(__name__)

StatusListener = Callable[[StatusEvent], None]


class StatusPublisher:
    """Keeps the last status event and forwards new ones to listeners."""

    def __init__(self):
        self._listeners: List[StatusListener] = []
        self._status: Optional[StatusEvent] = None

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def status(self) -> Optional[StatusEvent]:
        """Most recent status event."""
        return self._status

    def _publish(
        self,
        message: str,
        level: str = "info",
        state: Optional[ScanState] = None,
    ) -> StatusEvent:
        event = StatusEvent(message=message, level=level, state=state)
        self._status = event
        logger.debug(f"[{level}] {message}")
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Status listener error: {e}")
        return event
