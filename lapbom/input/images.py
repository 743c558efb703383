"""
Image conversion for uploads and camera captures.

Everything sent to the solver is a base64 JPEG body (no data-URL prefix).
"""

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import Union

from PIL import Image, ImageOps, UnidentifiedImageError

from ..utils.errors import ImageError


logger = logging.getLogger(__name__)

JPEG_MIME = "image/jpeg"
DEFAULT_MAX_SIZE = 1024
DEFAULT_QUALITY = 0.85


def file_to_base64(path: Union[str, Path]) -> str:
    """
    Read an image file and return its contents as base64 text.

    Raises:
        ImageError: If the file cannot be read.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageError(
            f"Could not read image file '{path.name}'",
            path=str(path),
            technical_details=str(e),
        )
    if not data:
        raise ImageError(f"Image file '{path.name}' is empty", path=str(path))
    return base64.b64encode(data).decode("ascii")


def resize_image(
    b64: str, max_size: int = DEFAULT_MAX_SIZE, quality: float = DEFAULT_QUALITY
) -> str:
    """
    Shrink an image so its longer side is at most ``max_size`` and re-encode as JPEG.

    Args:
        b64: Base64 image body in any format Pillow can open
        max_size: Maximum width/height in pixels (aspect ratio is kept)
        quality: JPEG quality between 0 and 1

    Returns:
        Base64 JPEG body.

    Raises:
        ImageError: If the data is not a decodable image.
    """
    image = decode_image(b64)

    # Phone photos carry their rotation in EXIF
    image = ImageOps.exif_transpose(image)
    if image.mode != "RGB":
        image = image.convert("RGB")

    if max(image.size) > max_size:
        image.thumbnail((max_size, max_size), Image.Resampling.LANCZOS)
        logger.debug("Resized image to %sx%s", *image.size)

    return encode_jpeg(image, quality)


def decode_image(b64: str) -> Image.Image:
    """Decode a base64 body into a loaded PIL image."""
    try:
        raw = base64.b64decode(b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageError("Image data is not valid base64", technical_details=str(e))

    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageError(
            "The file is not a supported image", technical_details=str(e)
        )
    return image


def encode_jpeg(image: Image.Image, quality: float = DEFAULT_QUALITY) -> str:
    """Encode a PIL image as a base64 JPEG body."""
    if image.mode != "RGB":
        image = image.convert("RGB")
    buf = io.BytesIO()
    image.save(buf, format="JPEG", quality=int(round(quality * 100)))
    return base64.b64encode(buf.getvalue()).decode("ascii")


def load_image_file(path: Union[str, Path], max_size: int = DEFAULT_MAX_SIZE) -> str:
    """Read, resize and re-encode an image file for upload."""
    return resize_image(file_to_base64(path), max_size=max_size)


def to_data_url(b64: str) -> str:
    """Data URL for showing a base64 JPEG in HTML."""
    return f"data:{JPEG_MIME};base64,{b64}"
