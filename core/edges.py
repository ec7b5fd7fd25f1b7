"""
core/edges.py

Sobel gradient-magnitude edge map on the intensity (R) channel.

Only interior pixels (1 <= x < W-1, 1 <= y < H-1) are written: R, G, B get
round(sqrt(gx^2 + gy^2)) clamped to 255 and alpha is forced to 255. The outer
one-pixel ring keeps whatever the previous stage left.
"""

from typing import Tuple
import numpy as np

from .parallel import run_row_bands
from .pixel_buffer import PixelBuffer, to_uint8

EDGE_METHODS = ("sobel", "canny")

SOBEL_X = np.array([[-1, 0, 1],
                    [-2, 0, 2],
                    [-1, 0, 1]], dtype=np.int64)
SOBEL_Y = np.array([[-1, -2, -1],
                    [0, 0, 0],
                    [1, 2, 1]], dtype=np.int64)
SOBEL_X.setflags(write=False)
SOBEL_Y.setflags(write=False)


def _window_sum(src: np.ndarray, kernel: np.ndarray, lo: int, hi: int) -> np.ndarray:
    """Correlate rows [lo, hi) of the interior with a 3x3 integer kernel."""
    out_w = src.shape[1] - 2
    acc = np.zeros((hi - lo, out_w), dtype=np.int64)
    for ky in range(3):
        rows = src[lo - 1 + ky : hi - 1 + ky]
        for kx in range(3):
            weight = int(kernel[ky, kx])
            if weight:
                acc += rows[:, kx : kx + out_w] * weight
    return acc


def sobel_gradients(buffer: PixelBuffer) -> Tuple[np.ndarray, np.ndarray]:
    """
    Return (gx, gy) int64 arrays of shape (H-2, W-2) for the interior pixels.
    Empty arrays when the image has no interior.
    """
    H, W = buffer.shape
    if H < 3 or W < 3:
        empty = np.zeros((max(H - 2, 0), max(W - 2, 0)), dtype=np.int64)
        return empty, empty.copy()
    src = buffer.intensity().astype(np.int64)
    return _window_sum(src, SOBEL_X, 1, H - 1), _window_sum(src, SOBEL_Y, 1, H - 1)


def gradient_magnitude(gx: np.ndarray, gy: np.ndarray) -> np.ndarray:
    gx = np.asarray(gx, dtype=np.float64)
    gy = np.asarray(gy, dtype=np.float64)
    return np.sqrt(gx * gx + gy * gy)


def sobel_edge_detection(buffer: PixelBuffer, workers: int = 1) -> PixelBuffer:
    """
    Replace interior pixels with their Sobel gradient magnitude.
    Reads from a copy of the pre-stage intensity plane. Mutates and returns `buffer`.
    """
    H, W = buffer.shape
    if H < 3 or W < 3:
        return buffer

    src = buffer.intensity().astype(np.int64)
    px = buffer.pixels()

    def _band(lo: int, hi: int) -> None:
        gx = _window_sum(src, SOBEL_X, lo, hi)
        gy = _window_sum(src, SOBEL_Y, lo, hi)
        mag = to_uint8(gradient_magnitude(gx, gy))
        px[lo:hi, 1 : W - 1, :3] = mag[..., None]
        px[lo:hi, 1 : W - 1, 3] = 255

    run_row_bands(_band, 1, H - 1, workers)
    return buffer
