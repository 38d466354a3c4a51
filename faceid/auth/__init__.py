"""Scan/auth and registration flows."""

from .types import ScanResult, ScanState, StatusEvent, UnavailablePolicy
from .status import StatusPublisher
from .flow import (
    ScanFlow,
    browser_redirect,
    READY_MESSAGE,
    NO_FACE_REASON,
    NO_MEMBERS_REASON,
    NO_MATCH_REASON,
)
from .registration import (
    RegistrationFlow,
    EMPTY_NAME_WARNING,
    REGISTERED_MESSAGE,
    SAVE_FAILED_MESSAGE,
)

__all__ = [
    "ScanResult",
    "ScanState",
    "StatusEvent",
    "UnavailablePolicy",
    "StatusPublisher",
    "ScanFlow",
    "browser_redirect",
    "READY_MESSAGE",
    "NO_FACE_REASON",
    "NO_MEMBERS_REASON",
    "NO_MATCH_REASON",
    "RegistrationFlow",
    "EMPTY_NAME_WARNING",
    "REGISTERED_MESSAGE",
    "SAVE_FAILED_MESSAGE",
]
