"""
Camera capture through OpenCV.

Opens a video device, hands out live frames for the viewfinder and
encodes a still frame as a base64 JPEG.
"""

import base64
import logging
from typing import Optional

import cv2
import numpy as np

from ..utils.errors import CameraError


logger = logging.getLogger(__name__)

CAPTURE_QUALITY = 85  # JPEG quality for captured stills (0-100)
PERMISSION_MESSAGE = "Unable to access camera. Please check permissions."


class CameraCapture:
    """
    Wrapper around ``cv2.VideoCapture``.

    The stream is opened lazily and released on ``stop()`` or when used
    as a context manager.

    Usage:
        with CameraCapture() as camera:
            frame = camera.read_frame()
            jpeg_b64 = camera.capture()
    """

    def __init__(self, device_index: int = 0, capture_factory=None):
        """
        Initialize camera capture.

        Args:
            device_index: OpenCV device index. 0 is the system default camera.
            capture_factory: Callable returning a VideoCapture-like object.
                             Defaults to ``cv2.VideoCapture``.
        """
        self.device_index = device_index
        self._factory = capture_factory or cv2.VideoCapture
        self._stream = None
        self._last_frame: Optional[np.ndarray] = None

    def start(self) -> None:
        """
        Open the video stream.

        Raises:
            CameraError: If the device cannot be opened.
        """
        if self.is_open:
            return

        stream = self._factory(self.device_index)
        if stream is None or not stream.isOpened():
            if stream is not None:
                stream.release()
            logger.warning("Camera %s could not be opened", self.device_index)
            raise CameraError(
                PERMISSION_MESSAGE,
                technical_details=f"cv2.VideoCapture({self.device_index}) is not opened",
            )
        self._stream = stream
        logger.info("Camera %s opened", self.device_index)

    def stop(self) -> None:
        """Release the video stream. Safe to call when already stopped."""
        if self._stream is not None:
            self._stream.release()
            self._stream = None
            logger.info("Camera %s released", self.device_index)
        self._last_frame = None

    def restart(self) -> None:
        """Stop and re-open the stream."""
        self.stop()
        self.start()

    def read_frame(self) -> np.ndarray:
        """
        Grab the next BGR frame from the stream.

        Raises:
            CameraError: If the stream is closed or no frame is available.
        """
        if not self.is_open:
            raise CameraError("Camera is not started")

        ok, frame = self._stream.read()
        if not ok or frame is None:
            raise CameraError(
                "Could not read a frame from the camera",
                suggestions=["Restart the camera", "Upload a photo instead"],
            )
        self._last_frame = frame
        return frame

    def capture(self) -> str:
        """
        Capture a still frame as a base64 JPEG body.

        Uses the frame last shown in the viewfinder when there is one,
        so the picture matches what the user saw.
        """
        frame = self._last_frame if self._last_frame is not None else self.read_frame()
        return encode_frame(frame)

    @property
    def is_open(self) -> bool:
        return self._stream is not None and self._stream.isOpened()

    def __enter__(self) -> "CameraCapture":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()


def encode_frame(frame: np.ndarray, quality: int = CAPTURE_QUALITY) -> str:
    """Encode a BGR frame as a base64 JPEG body."""
    ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, quality])
    if not ok:
        raise CameraError("Failed to encode the captured frame")
    return base64.b64encode(buf.tobytes()).decode("ascii")
