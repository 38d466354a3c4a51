"""FaceID login demo.

Simulated face ID login: a member store persisted in a local key-value
namespace, a timed scan that "matches" through a pluggable matcher, and a
redirect on success.

Quick Start:
    # Command line
    python -m faceid register "Ada"
    python -m faceid scan

    # As library
    from faceid import MemberStore, ScanFlow, SignalDetector

    store = MemberStore()
    store.register("Ada")
    flow = ScanFlow(store, detector=SignalDetector("present"))
    result = asyncio.run(flow.scan())
"""

__version__ = "0.1.0"

from .members import MemberRecord, MemberStore, JsonFileStorage, MemoryStorage
from .detection import DetectionSignal, SignalDetector
from .matching import LastRegisteredMatcher, create_matcher
from .auth import (
    RegistrationFlow,
    ScanFlow,
    ScanResult,
    ScanState,
    UnavailablePolicy,
)
from .session import FaceIdSession

__all__ = [
    "MemberRecord",
    "MemberStore",
    "JsonFileStorage",
    "MemoryStorage",
    "DetectionSignal",
    "SignalDetector",
    "LastRegisteredMatcher",
    "create_matcher",
    "RegistrationFlow",
    "ScanFlow",
    "ScanResult",
    "ScanState",
    "UnavailablePolicy",
    "FaceIdSession",
]
