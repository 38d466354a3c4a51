"""Pytest configuration and fixtures."""

import asyncio
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


class VirtualClock:
    """Monotonic clock advanced only by its own sleep."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += max(seconds, 0.0)
        # Yield so other tasks get a turn, like a real timer would
        await asyncio.sleep(0)


class FakeCamera:
    """Stand-in for faceid.camera.Camera."""

    instances = []

    def __init__(self, config, can_open=True, image=None):
        self.config = config
        self.can_open = can_open
        self.image = image
        self.is_open = False
        self.closed = False
        FakeCamera.instances.append(self)

    def open(self):
        self.is_open = self.can_open
        return self.can_open

    def read(self):
        from faceid.camera import Frame

        if not self.is_open or self.image is None:
            return None
        return Frame(image=self.image, timestamp=0.0, frame_number=1)

    def close(self):
        self.is_open = False
        self.closed = True


@pytest.fixture
def clock():
    """Virtual clock with an awaitable sleep."""
    return VirtualClock()


@pytest.fixture
def fake_camera_factory():
    """Factory producing FakeCamera instances; resets the instance log."""
    FakeCamera.instances = []

    def factory(config):
        return FakeCamera(config, image=np.zeros((480, 640, 3), dtype=np.uint8))

    factory.instances = FakeCamera.instances
    return factory


@pytest.fixture
def sample_image():
    """Create a sample test image."""
    return np.random.randint(0, 255, (480, 640, 3), dtype=np.uint8)


@pytest.fixture
def black_image():
    """All black BGR image."""
    return np.zeros((240, 320, 3), dtype=np.uint8)


@pytest.fixture
def memory_store():
    """Empty member store on an in-memory namespace with a fixed clock."""
    from faceid.members import MemberStore, MemoryStorage

    return MemberStore(MemoryStorage(), clock=lambda: 1700000000.0)


@pytest.fixture
def fast_config_dict(tmp_path):
    """Configuration with zero delays and a temporary storage file."""
    return {
        "storage": {"path": str(tmp_path / "storage.json")},
        "scan": {
            "iterations": 3,
            "poll_interval_ms": 0,
            "min_duration_ms": 0,
        },
        "auth": {
            "redirect_url": None,
            "confirm_delay_ms": 0,
            "transition_delay_ms": 0,
        },
        "registration": {"capture_delay_ms": 0, "saved_delay_ms": 0},
        "detection": {"backend": "present"},
    }
