"""
Tests for camera capture with a fake video device.
"""

import base64

import numpy as np
import pytest

from lapbom.input.camera import PERMISSION_MESSAGE, CameraCapture, encode_frame
from lapbom.utils.errors import CameraError


class FakeStream:
    """Minimal ``cv2.VideoCapture`` stand-in."""

    def __init__(self, opened=True, frames=None):
        self.opened = opened
        self.frames = list(frames or [])
        self.released = False

    def isOpened(self):
        return self.opened and not self.released

    def read(self):
        if not self.frames:
            return False, None
        return True, self.frames.pop(0)

    def release(self):
        self.released = True


def _frame(value=0):
    return np.full((48, 64, 3), value, dtype=np.uint8)


class StreamFactory:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.streams = []
        self.indices = []

    def __call__(self, index):
        self.indices.append(index)
        stream = FakeStream(**self.kwargs)
        self.streams.append(stream)
        return stream


class TestCameraCapture:
    """Test the capture lifecycle."""

    def test_start_and_stop(self):
        factory = StreamFactory(frames=[_frame()])
        camera = CameraCapture(device_index=1, capture_factory=factory)

        camera.start()
        assert camera.is_open
        assert factory.indices == [1]

        camera.stop()
        assert not camera.is_open
        assert factory.streams[0].released

    def test_start_twice_opens_once(self):
        factory = StreamFactory()
        camera = CameraCapture(capture_factory=factory)

        camera.start()
        camera.start()

        assert len(factory.streams) == 1

    def test_permission_denied(self):
        factory = StreamFactory(opened=False)
        camera = CameraCapture(capture_factory=factory)

        with pytest.raises(CameraError) as exc_info:
            camera.start()

        assert exc_info.value.user_message == PERMISSION_MESSAGE
        assert factory.streams[0].released
        assert not camera.is_open

    def test_stop_when_not_started(self):
        CameraCapture(capture_factory=StreamFactory()).stop()

    def test_restart_opens_new_stream(self):
        factory = StreamFactory()
        camera = CameraCapture(capture_factory=factory)

        camera.start()
        camera.restart()

        assert len(factory.streams) == 2
        assert factory.streams[0].released
        assert camera.is_open

    def test_read_requires_start(self):
        with pytest.raises(CameraError):
            CameraCapture(capture_factory=StreamFactory()).read_frame()

    def test_read_failure(self):
        camera = CameraCapture(capture_factory=StreamFactory(frames=[]))
        camera.start()

        with pytest.raises(CameraError):
            camera.read_frame()

    def test_capture_uses_last_shown_frame(self):
        factory = StreamFactory(frames=[_frame(255), _frame(0)])
        with CameraCapture(capture_factory=factory) as camera:
            camera.read_frame()
            b64 = camera.capture()

        # Only one frame was consumed from the stream
        assert len(factory.streams[0].frames) == 1
        assert base64.b64decode(b64)[:2] == b"\xff\xd8"

    def test_capture_reads_when_nothing_shown(self):
        factory = StreamFactory(frames=[_frame()])
        with CameraCapture(capture_factory=factory) as camera:
            camera.capture()

        assert factory.streams[0].frames == []

    def test_context_manager_releases(self):
        factory = StreamFactory()
        with CameraCapture(capture_factory=factory):
            pass

        assert factory.streams[0].released


class TestEncodeFrame:
    def test_jpeg_output(self):
        data = base64.b64decode(encode_frame(_frame(128)))

        assert data[:2] == b"\xff\xd8"
