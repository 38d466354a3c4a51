"""Scan/auth state machine.

Idle -> Scanning -> Granted | Denied. A scan polls the detector for a fixed
number of iterations, never finishes faster than the configured minimum
duration, then asks the matcher which member the scan identifies.
"""

import asyncio
import logging
import random
import time
import webbrowser
from typing import Awaitable, Callable, List, Optional

import numpy as np

from ..constants import SCAN_STEP_MESSAGES, AuthConfig, ScanConfig
from ..detection import BaseSignalDetector, DetectionSignal, StaticSignalDetector
from ..matching import BaseIdentityMatcher, LastRegisteredMatcher
from ..members import MemberRecord, MemberStore
from .status import StatusPublisher
from .types import ScanResult, ScanState, UnavailablePolicy

logger = logging.getLogger(__name__)

READY_MESSAGE = "System Active. Ready."
SCANNING_MESSAGE = "Scanning Biometrics..."
NO_FACE_REASON = "No Face Detected"
NO_MEMBERS_REASON = "Access Denied: No Registered Members"
NO_MATCH_REASON = "Access Denied: No Match"

FrameSource = Callable[[], Optional[np.ndarray]]
RedirectHandler = Callable[[str], object]


def browser_redirect(url: str) -> bool:
    """Open the redirect target in the default web browser."""
    logger.info(f"Redirecting to {url}")
    return webbrowser.open(url)


class ScanFlow(StatusPublisher):
    """Simulated biometric scan with pluggable detection and matching."""

    def __init__(
        self,
        store: MemberStore,
        detector: Optional[BaseSignalDetector] = None,
        matcher: Optional[BaseIdentityMatcher] = None,
        scan_config: Optional[ScanConfig] = None,
        auth_config: Optional[AuthConfig] = None,
        policy: Optional[UnavailablePolicy] = None,
        frame_source: Optional[FrameSource] = None,
        redirect_handler: Optional[RedirectHandler] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the scan flow.

        Args:
            store: Member store read during matching
            detector: Face-signal detector. No capability if None.
            matcher: Identity matcher (default: last registered)
            scan_config: Scan timings
            auth_config: Redirect and policy settings
            policy: Overrides auth_config.unavailable_policy
            frame_source: Returns the current camera image, or None
            redirect_handler: Called with the redirect URL on grant
            sleep: Awaitable sleep, replaced in tests
            clock: Monotonic clock in seconds, replaced in tests
            rng: Random source for the status texts
        """
        super().__init__()
        self._store = store
        self._detector = detector or StaticSignalDetector(DetectionSignal.UNAVAILABLE)
        self._matcher = matcher or LastRegisteredMatcher()
        self._scan_config = scan_config or ScanConfig()
        self._auth_config = auth_config or AuthConfig()
        self._policy = policy or UnavailablePolicy(self._auth_config.unavailable_policy)
        self._frame_source = frame_source
        self._redirect_handler = redirect_handler
        self._sleep = sleep
        self._clock = clock
        self._rng = rng or random.Random()

        self._state = ScanState.IDLE
        self._enabled = True
        self._last_result: Optional[ScanResult] = None

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def policy(self) -> UnavailablePolicy:
        return self._policy

    @property
    def detector(self) -> BaseSignalDetector:
        return self._detector

    @property
    def last_result(self) -> Optional[ScanResult]:
        return self._last_result

    @property
    def is_scanning(self) -> bool:
        return self._state is ScanState.SCANNING

    def disable(self, reason: str) -> None:
        """Block scans, e.g. when the camera is unavailable."""
        self._enabled = False
        self._publish(reason, "error", self._state)
        logger.warning(f"Scanning disabled: {reason}")

    def enable(self) -> None:
        """Allow scans again."""
        self._enabled = True
        self._publish(READY_MESSAGE, "info", self._state)

    def logout(self) -> bool:
        """Return to Idle after a finished scan.

        Returns:
            False if a scan is in progress
        """
        if self._state is ScanState.SCANNING:
            return False
        self._state = ScanState.IDLE
        self._publish(READY_MESSAGE, "info", self._state)
        return True

    async def scan(self, frame: Optional[np.ndarray] = None) -> Optional[ScanResult]:
        """Run one scan.

        Args:
            frame: Still image probed on every iteration instead of the
                   frame source

        Returns:
            The scan result, or None if the flow is busy, already granted,
            or disabled
        """
        if self._state is not ScanState.IDLE or not self._enabled:
            logger.debug(f"Ignoring scan request in state {self._state.value}")
            return None

        self._state = ScanState.SCANNING
        start = self._clock()
        try:
            return await self._run_scan(frame, start)
        except Exception as e:
            logger.error(f"Scan failed: {e}")
            return self._deny(NO_MATCH_REASON, DetectionSignal.UNAVAILABLE, start)
        finally:
            # Cancelled mid-scan
            if self._state is ScanState.SCANNING:
                logger.info("Scan interrupted")
                self._state = ScanState.IDLE
                self._publish(READY_MESSAGE, "info", self._state)

    async def _run_scan(self, frame: Optional[np.ndarray], start: float) -> ScanResult:
        self._publish(SCANNING_MESSAGE, "info", self._state)

        config = self._scan_config
        samples: List[DetectionSignal] = []
        last_frame = frame

        for i in range(config.iterations):
            if config.status_every > 0 and i % config.status_every == 0:
                self._publish(self._rng.choice(SCAN_STEP_MESSAGES), "info", self._state)

            current = frame if frame is not None else self._grab_frame()
            if current is not None:
                last_frame = current
            samples.append(self._probe(current))

            await self._sleep(config.poll_interval)

        elapsed = self._clock() - start
        if elapsed < config.min_duration:
            await self._sleep(config.min_duration - elapsed)

        signal = DetectionSignal.combine(samples)
        logger.info(f"Scan finished with face signal {signal.value}")

        if not self._policy.face_found(signal):
            return self._deny(NO_FACE_REASON, signal, start)

        members = self._store.list()
        if not members:
            return self._deny(NO_MEMBERS_REASON, signal, start)

        member = self._match(members, last_frame)
        if member is None:
            return self._deny(NO_MATCH_REASON, signal, start)

        return await self._grant(member, signal, start)

    def _grab_frame(self) -> Optional[np.ndarray]:
        if self._frame_source is None:
            return None
        try:
            return self._frame_source()
        except Exception as e:
            logger.warning(f"Frame source failed: {e}")
            return None

    def _probe(self, frame: Optional[np.ndarray]) -> DetectionSignal:
        try:
            return self._detector.probe(frame)
        except Exception as e:
            logger.warning(f"Detector failed, treating as unavailable: {e}")
            return DetectionSignal.UNAVAILABLE

    def _match(
        self,
        members: List[MemberRecord],
        frame: Optional[np.ndarray],
    ) -> Optional[MemberRecord]:
        try:
            return self._matcher.match(members, frame)
        except Exception as e:
            logger.error(f"Matcher {self._matcher.name} failed: {e}")
            return None

    def _deny(self, reason: str, signal: DetectionSignal, start: float) -> ScanResult:
        result = ScanResult(
            state=ScanState.DENIED,
            elapsed=self._clock() - start,
            face_signal=signal,
            reason=reason,
        )
        self._state = ScanState.DENIED
        self._last_result = result
        self._publish(reason, "error", self._state)
        logger.info(f"Scan denied: {reason}")

        self._state = ScanState.IDLE
        return result

    async def _grant(
        self,
        member: MemberRecord,
        signal: DetectionSignal,
        start: float,
    ) -> ScanResult:
        redirect_url = self._auth_config.redirect_url
        result = ScanResult(
            state=ScanState.GRANTED,
            elapsed=self._clock() - start,
            face_signal=signal,
            member=member,
            redirect_url=redirect_url,
        )
        self._state = ScanState.GRANTED
        self._last_result = result
        self._publish(f"IDENTITY CONFIRMED: {member.name}", "success", self._state)
        logger.info(f"Access granted to {member.name} (id={member.id})")

        if redirect_url and self._redirect_handler is not None:
            await self._sleep(self._auth_config.confirm_delay)
            await self._sleep(self._auth_config.transition_delay)
            try:
                self._redirect_handler(redirect_url)
            except Exception as e:
                logger.warning(f"Redirect to {redirect_url} failed: {e}")

        return result
