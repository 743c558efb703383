"""Input layer: camera capture, image conversion, and the symbol keypad."""

from .camera import CameraCapture
from .images import file_to_base64, resize_image, to_data_url
from .keypad import insert_at_cursor, backspace, SYMBOL_SECTIONS

__all__ = [
    "CameraCapture",
    "file_to_base64",
    "resize_image",
    "to_data_url",
    "insert_at_cursor",
    "backspace",
    "SYMBOL_SECTIONS",
]
