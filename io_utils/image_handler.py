# io_utils/image_handler.py
"""
Image read/write helpers using Pillow.

Functions:
- read_image(path) -> (PixelBuffer, meta), always decoded to RGBA
- save_image(path, buffer) -> writes image
- encode_data_url(buffer, fmt='PNG') -> 'data:image/png;base64,...'
- detect_is_grayscale(buffer) -> bool
"""

import base64
import io
import os
from typing import Tuple

from PIL import Image, UnidentifiedImageError
import pillow_avif  # noqa: F401  registers the AVIF codec with Pillow
import numpy as np

from core.pixel_buffer import PixelBuffer

_MIME_TYPES = {"PNG": "image/png", "JPEG": "image/jpeg", "WEBP": "image/webp", "BMP": "image/bmp"}


class ImageDecodeError(ValueError):
    """The file could not be decoded as an image."""


def read_image(path: str) -> Tuple[PixelBuffer, dict]:
    """
    Read an image from `path` and return (buffer, meta).
    - Every image is converted to RGBA; images without alpha get an opaque channel.
    - Meta contains the source mode, size and whether the source carried alpha.
    """
    try:
        with Image.open(path) as img:
            img.load()
            mode = img.mode
            has_alpha = mode in ("RGBA", "LA", "PA") or ("transparency" in img.info)
            arr = np.asarray(img.convert("RGBA"), dtype=np.uint8)
            meta = {"mode": mode, "size": img.size, "has_alpha": has_alpha, "format": img.format}
    except FileNotFoundError:
        raise
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Please upload a valid image file: {os.path.basename(path)} ({e})") from e
    return PixelBuffer.from_array(arr), meta


def buffer_to_image(buffer: PixelBuffer) -> Image.Image:
    return Image.fromarray(buffer.to_array())


def save_image(path: str, buffer: PixelBuffer):
    """
    Save a buffer to `path`. Formats without alpha (JPEG) are flattened to RGB.
    """
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)
    img = buffer_to_image(buffer)
    if os.path.splitext(path)[1].lower() in (".jpg", ".jpeg"):
        img = img.convert("RGB")
    img.save(path)
    return path


def encode_data_url(buffer: PixelBuffer, fmt: str = "PNG") -> str:
    """Encode the buffer as a base64 data URL suitable for an <img src=...>."""
    fmt = fmt.upper()
    if fmt not in _MIME_TYPES:
        raise ValueError(f"Unsupported data URL format '{fmt}'.")
    img = buffer_to_image(buffer)
    if fmt == "JPEG":
        img = img.convert("RGB")
    out = io.BytesIO()
    img.save(out, format=fmt)
    payload = base64.b64encode(out.getvalue()).decode("ascii")
    return f"data:{_MIME_TYPES[fmt]};base64,{payload}"


def detect_is_grayscale(buffer: PixelBuffer) -> bool:
    px = buffer.pixels()
    return bool(np.array_equal(px[..., 0], px[..., 1]) and np.array_equal(px[..., 1], px[..., 2]))
