"""
core/grayscale.py

Luminosity-weighted RGB -> gray reduction.
"""

import numpy as np

from .pixel_buffer import PixelBuffer, to_uint8

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def luminosity(rgb: np.ndarray) -> np.ndarray:
    """
    Return round(0.299*R + 0.587*G + 0.114*B) as uint8 for an (..., 3) array.
    Terms are summed left to right in float64.
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    gray = wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]
    return to_uint8(gray)


def rgb_to_grayscale(buffer: PixelBuffer) -> PixelBuffer:
    """
    Replace R, G, B of every pixel with its luminosity. Alpha is untouched.
    Mutates and returns `buffer`.
    """
    px = buffer.pixels()
    if px.size == 0:
        return buffer
    gray = luminosity(px[..., :3])
    px[..., 0] = gray
    px[..., 1] = gray
    px[..., 2] = gray
    return buffer
