"""Tests for the registration flow, camera switching and session wiring."""

import asyncio

import numpy as np
import pytest

from conftest import FakeCamera


class TestRegistrationFlow:
    """Test cases for RegistrationFlow."""

    def test_save_registers_after_delays(self, memory_store, clock):
        """Capture delay, register, saved delay, confirmation."""
        from faceid.auth import REGISTERED_MESSAGE, RegistrationFlow
        from faceid.constants import RegistrationConfig

        flow = RegistrationFlow(memory_store, RegistrationConfig(), sleep=clock.sleep)
        events = []
        flow.add_listener(events.append)

        record = asyncio.run(flow.save("Ada"))

        assert record.name == "Ada"
        assert len(memory_store) == 1
        assert clock.sleeps == [1.5, 0.8]
        assert [e.message for e in events] == ["Scanning...", "Saved!", REGISTERED_MESSAGE]
        assert not flow.is_saving

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_warns(self, memory_store, clock, name):
        """Blank names produce a warning and change nothing."""
        from faceid.auth import EMPTY_NAME_WARNING, RegistrationFlow

        flow = RegistrationFlow(memory_store, sleep=clock.sleep)
        events = []
        flow.add_listener(events.append)

        assert asyncio.run(flow.save(name)) is None
        assert len(memory_store) == 0
        assert clock.sleeps == []
        assert events[-1].message == EMPTY_NAME_WARNING
        assert events[-1].level == "warning"

    def test_second_save_is_noop(self, memory_store, clock):
        """Only one registration at a time."""
        from faceid.auth import RegistrationFlow

        flow = RegistrationFlow(memory_store, sleep=clock.sleep)

        async def run():
            first = asyncio.ensure_future(flow.save("Ada"))
            await asyncio.sleep(0)
            assert flow.is_saving
            second = await flow.save("Grace")
            return await first, second

        first, second = asyncio.run(run())

        assert first.name == "Ada"
        assert second is None
        assert [m.name for m in memory_store] == ["Ada"]

    def test_storage_failure_publishes_error(self, clock):
        """A failed write is reported as a status and returns None."""
        from faceid.auth import SAVE_FAILED_MESSAGE, RegistrationFlow
        from faceid.members import MemberStore, MemoryStorage

        class FullStorage(MemoryStorage):
            def set(self, key, value):
                raise OSError("disk full")

        store = MemberStore(FullStorage())
        flow = RegistrationFlow(store, sleep=clock.sleep)
        events = []
        flow.add_listener(events.append)

        record = asyncio.run(flow.save("Ada"))

        assert record is None
        assert len(store) == 0
        assert not flow.is_saving
        assert events[-1].message == SAVE_FAILED_MESSAGE
        assert events[-1].level == "error"

    def test_save_leaves_camera_on_registration_view(self, memory_store, clock, fake_camera_factory):
        """Opening registration uses the registration camera; save does not switch back."""
        from faceid.auth import RegistrationFlow
        from faceid.camera import MAIN_VIEW, REGISTRATION_VIEW, CameraConfig, CameraSwitcher

        switcher = CameraSwitcher(
            {MAIN_VIEW: CameraConfig(device=0), REGISTRATION_VIEW: CameraConfig(device=1)},
            factory=fake_camera_factory,
        )
        switcher.switch_to(MAIN_VIEW)
        flow = RegistrationFlow(memory_store, camera=switcher, sleep=clock.sleep)

        assert flow.open()
        assert switcher.active_view == REGISTRATION_VIEW

        asyncio.run(flow.save("Ada"))

        assert switcher.active_view == REGISTRATION_VIEW
        assert [c.config.device for c in fake_camera_factory.instances] == [0, 1]


class TestCameraSwitcher:
    """Test cases for CameraSwitcher."""

    def _switcher(self, factory):
        from faceid.camera import MAIN_VIEW, REGISTRATION_VIEW, CameraConfig, CameraSwitcher

        return CameraSwitcher(
            {MAIN_VIEW: CameraConfig(device=0), REGISTRATION_VIEW: CameraConfig(device=1)},
            factory=factory,
        )

    def test_switch_releases_previous_stream(self, fake_camera_factory):
        """Only one stream is open after switching."""
        switcher = self._switcher(fake_camera_factory)

        assert switcher.switch_to("main")
        assert switcher.switch_to("registration")

        main_cam, reg_cam = fake_camera_factory.instances
        assert main_cam.closed and not main_cam.is_open
        assert reg_cam.is_open

    def test_same_view_is_not_reopened(self, fake_camera_factory):
        """Switching to the active view keeps the stream."""
        switcher = self._switcher(fake_camera_factory)

        switcher.switch_to("main")
        switcher.switch_to("main")

        assert len(fake_camera_factory.instances) == 1

    def test_unknown_view(self, fake_camera_factory):
        """Unknown views are a programming error."""
        switcher = self._switcher(fake_camera_factory)

        with pytest.raises(ValueError):
            switcher.switch_to("side")

    def test_open_failure(self):
        """A camera that cannot open leaves no active stream."""
        switcher = self._switcher(lambda config: FakeCamera(config, can_open=False))

        assert not switcher.switch_to("main")
        assert switcher.camera is None
        assert switcher.read_image() is None

    def test_read_image(self, fake_camera_factory):
        """Images come from the active camera."""
        switcher = self._switcher(fake_camera_factory)
        assert switcher.read_image() is None

        switcher.switch_to("main")
        image = switcher.read_image()

        assert isinstance(image, np.ndarray)
        assert image.shape == (480, 640, 3)

    def test_close(self, fake_camera_factory):
        """close() releases the stream."""
        switcher = self._switcher(fake_camera_factory)
        switcher.switch_to("main")

        switcher.close()

        assert switcher.active_view is None
        assert fake_camera_factory.instances[0].closed

    def test_camera_read_without_open(self):
        """A closed camera returns no frame."""
        from faceid.camera import Camera

        camera = Camera()
        assert not camera.is_open
        assert camera.read() is None
        assert camera.frame_count == 0


class TestFaceIdSession:
    """Test cases for session wiring."""

    def test_session_without_camera(self, fast_config_dict):
        """Sessions without cameras are always scan-ready."""
        from faceid import FaceIdSession
        from faceid.constants import Config

        session = FaceIdSession.from_config(Config.from_dict(fast_config_dict), use_camera=False)

        assert session.camera is None
        assert session.start()
        assert session.scan_flow.enabled

    def test_camera_denied_disables_scan(self, fast_config_dict):
        """A camera that cannot open disables scanning with a message."""
        from faceid import FaceIdSession
        from faceid.camera import CameraSwitcher
        from faceid.constants import Config
        from faceid.session import CAMERA_DENIED_MESSAGE

        session = FaceIdSession.from_config(Config.from_dict(fast_config_dict), use_camera=False)
        session.camera = CameraSwitcher(
            {"main": None, "registration": None},
            factory=lambda config: FakeCamera(config, can_open=False),
        )

        assert not session.start()
        assert not session.scan_flow.enabled
        assert session.scan_flow.status.message == CAMERA_DENIED_MESSAGE
        assert asyncio.run(session.scan_flow.scan()) is None

    def test_session_end_to_end(self, fast_config_dict):
        """Register then scan through a configured session."""
        from faceid import FaceIdSession
        from faceid.constants import Config

        config = Config.from_dict(fast_config_dict)
        with FaceIdSession.from_config(config, use_camera=False) as session:
            asyncio.run(session.register("Ada"))
            asyncio.run(session.register("Grace"))
            result = asyncio.run(session.scan_flow.scan())

        assert result.granted
        assert result.member.name == "Grace"

        reopened = FaceIdSession.from_config(config, use_camera=False)
        assert [m.name for m in reopened.store] == ["Ada", "Grace"]

    def test_register_returns_to_main_view(self, memory_store, clock, fake_camera_factory):
        """Session registration switches back to the main camera exactly once."""
        from faceid import FaceIdSession
        from faceid.auth import RegistrationFlow, ScanFlow
        from faceid.camera import MAIN_VIEW, REGISTRATION_VIEW, CameraConfig, CameraSwitcher

        switcher = CameraSwitcher(
            {MAIN_VIEW: CameraConfig(device=0), REGISTRATION_VIEW: CameraConfig(device=1)},
            factory=fake_camera_factory,
        )
        session = FaceIdSession(
            memory_store,
            ScanFlow(memory_store, sleep=clock.sleep, clock=clock),
            RegistrationFlow(memory_store, camera=switcher, sleep=clock.sleep),
            camera=switcher,
        )
        session.start()
        assert session.open_registration()

        record = asyncio.run(session.register("Ada"))

        assert record.name == "Ada"
        assert switcher.active_view == MAIN_VIEW
        assert session.scan_flow.enabled
        opened = fake_camera_factory.instances
        assert [c.config.device for c in opened] == [0, 1, 0]
        assert all(c.closed for c in opened[:-1])
        assert opened[-1].is_open

    def test_failed_registration_still_returns_to_main_view(self, fake_camera_factory):
        """A blank name leaves registration and re-enables scanning."""
        from faceid import FaceIdSession
        from faceid.auth import RegistrationFlow, ScanFlow
        from faceid.camera import MAIN_VIEW, REGISTRATION_VIEW, CameraConfig, CameraSwitcher
        from faceid.members import MemberStore

        store = MemberStore()
        switcher = CameraSwitcher(
            {MAIN_VIEW: CameraConfig(device=0), REGISTRATION_VIEW: CameraConfig(device=1)},
            factory=fake_camera_factory,
        )
        session = FaceIdSession(
            store,
            ScanFlow(store),
            RegistrationFlow(store, camera=switcher),
            camera=switcher,
        )
        session.open_registration()

        assert asyncio.run(session.register("  ")) is None
        assert switcher.active_view == MAIN_VIEW
        assert len(store) == 0
