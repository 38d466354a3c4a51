"""Scan/auth flow types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..detection import DetectionSignal
from ..members import MemberRecord


class ScanState(Enum):
    """States of the scan flow."""
    IDLE = "idle"
    SCANNING = "scanning"
    GRANTED = "granted"
    DENIED = "denied"


class UnavailablePolicy(Enum):
    """How an UNAVAILABLE detection signal is treated.

    - FAIL_CLOSED: as no face (deny)
    - FAIL_OPEN: as a face (continue to matching)
    """
    FAIL_CLOSED = "fail_closed"
    FAIL_OPEN = "fail_open"

    def face_found(self, signal: DetectionSignal) -> bool:
        """Resolve a signal to face present / not present."""
        if signal is DetectionSignal.UNAVAILABLE:
            return self is UnavailablePolicy.FAIL_OPEN
        return signal is DetectionSignal.PRESENT


@dataclass
class StatusEvent:
    """A user-visible status change."""

    message: str
    level: str = "info"  # info, success, warning, error
    state: Optional[ScanState] = None


@dataclass
class ScanResult:
    """Terminal outcome of a scan."""

    state: ScanState
    elapsed: float
    face_signal: DetectionSignal
    member: Optional[MemberRecord] = None
    reason: Optional[str] = None
    redirect_url: Optional[str] = None

    @property
    def granted(self) -> bool:
        return self.state is ScanState.GRANTED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "state": self.state.value,
            "granted": self.granted,
            "member": self.member.to_dict() if self.member else None,
            "reason": self.reason,
            "elapsed": round(self.elapsed, 3),
            "face_signal": self.face_signal.value,
            "redirect_url": self.redirect_url,
        }
