"""
Camera capture dialog.

Shows a live viewfinder and returns the captured still as a base64 JPEG.
"""

import logging
from typing import Optional

import cv2
from PyQt6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
)
from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QImage, QPixmap

from ..input.camera import CameraCapture
from ..utils.errors import CameraError


logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 33


def frame_to_qimage(frame) -> QImage:
    """Convert a BGR OpenCV frame to a QImage that owns its data."""
    rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    height, width, channels = rgb.shape
    image = QImage(rgb.data, width, height, channels * width, QImage.Format.Format_RGB888)
    return image.copy()


class CameraDialog(QDialog):
    """
    Modal "Capture Problem" dialog.

    Signals:
        captured: Emits the base64 JPEG body of the taken photo
    """

    captured = pyqtSignal(str)

    def __init__(self, camera: Optional[CameraCapture] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Capture Problem")
        self.setMinimumSize(640, 480)
        self.setStyleSheet("QDialog { background: #0f172a; } QLabel { color: #e2e8f0; }")

        self.camera = camera or CameraCapture()
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._update_frame)

        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)

        self.viewfinder = QLabel()
        self.viewfinder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.viewfinder.setStyleSheet("background: black;")
        self.viewfinder.setSizePolicy(
            QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding
        )
        layout.addWidget(self.viewfinder)

        controls = QHBoxLayout()
        controls.addStretch()

        self.restart_btn = QPushButton("⟳ Restart")
        self.restart_btn.setToolTip("Switch/Restart Camera")
        self.restart_btn.clicked.connect(self._on_restart)
        controls.addWidget(self.restart_btn)

        self.capture_btn = QPushButton("📷 Take Photo")
        self.capture_btn.setStyleSheet(
            "background: #4f46e5; color: white; font-weight: bold; padding: 8px 20px;"
        )
        self.capture_btn.clicked.connect(self._on_capture)
        controls.addWidget(self.capture_btn)

        controls.addStretch()
        layout.addLayout(controls)

    def showEvent(self, event):
        super().showEvent(event)
        self._start_camera()

    def done(self, result: int):
        # Every close path (capture, Esc, window button) ends here
        self._stop_camera()
        super().done(result)

    def _start_camera(self):
        try:
            self.camera.start()
        except CameraError as e:
            self._show_camera_error(e.user_message)
            return
        self.capture_btn.setEnabled(True)
        self._timer.start(FRAME_INTERVAL_MS)

    def _stop_camera(self):
        self._timer.stop()
        self.camera.stop()

    def _show_camera_error(self, message: str):
        self._timer.stop()
        self.viewfinder.setPixmap(QPixmap())
        self.viewfinder.setText(message)
        self.viewfinder.setStyleSheet("background: black; color: #f87171;")
        self.capture_btn.setEnabled(False)

    def _update_frame(self):
        try:
            frame = self.camera.read_frame()
        except CameraError as e:
            logger.warning("Camera frame grab failed: %s", e)
            self._show_camera_error(e.user_message)
            return

        pixmap = QPixmap.fromImage(frame_to_qimage(frame))
        self.viewfinder.setPixmap(
            pixmap.scaled(
                self.viewfinder.size(),
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
        )

    def _on_restart(self):
        self._stop_camera()
        self.viewfinder.setStyleSheet("background: black;")
        self.viewfinder.clear()
        self._start_camera()

    def _on_capture(self):
        try:
            b64 = self.camera.capture()
        except CameraError as e:
            self._show_camera_error(e.user_message)
            return
        self.captured.emit(b64)
        self.accept()
