"""
core/filters.py

Noise reduction by normalized-kernel convolution.

Functions:
- validate_kernel_size(k) -> int (raises InvalidKernelSize)
- gaussian_kernel(k) -> (k,k) float64 kernel, sigma = k/6, sums to 1
- build_kernel(kernel_size, filter_type='gaussian')
- convolve(buffer, kernel, workers=1) -> in-place, margin of k//2 left untouched
- apply_gaussian_filter(buffer, kernel_size, workers=1)

Border policy: no padding or mirroring. Only pixels whose full window lies inside
the image are written; the outer `half`-wide ring keeps its pre-filter values.
"""

from typing import Tuple
import numpy as np

from .errors import InvalidKernelSize
from .parallel import run_row_bands
from .pixel_buffer import PixelBuffer, to_uint8

KERNEL_SIZES = (3, 5, 7, 9, 11)
FILTER_TYPES = ("gaussian", "mean", "median")


def validate_kernel_size(kernel_size) -> int:
    if isinstance(kernel_size, bool) or not isinstance(kernel_size, (int, np.integer)):
        raise InvalidKernelSize(f"Kernel size must be an integer, got {kernel_size!r}.")
    k = int(kernel_size)
    if k not in KERNEL_SIZES:
        raise InvalidKernelSize(f"Kernel size must be odd and within [3, 11], got {k}.")
    return k


# --- Offset grid & kernels ---
def _offset_grid(kernel_size: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Integer offsets (y, x) in [-half, half] for every kernel cell, shaped (k,1) and (1,k).
    """
    half = kernel_size // 2
    y = np.arange(-half, half + 1, dtype=np.float64).reshape(kernel_size, 1)
    x = np.arange(-half, half + 1, dtype=np.float64).reshape(1, kernel_size)
    return y, x


def gaussian_kernel(kernel_size: int) -> np.ndarray:
    """
    Gaussian kernel exp(-(x^2 + y^2) / (2*sigma^2)) with sigma = k/6,
    divided by its total so the weights sum to 1. Returned read-only.
    """
    k = validate_kernel_size(kernel_size)
    sigma = k / 6.0
    y, x = _offset_grid(k)
    weights = np.exp(-(x * x + y * y) / (2.0 * sigma * sigma))
    # plain row-major running sum (np.sum is pairwise and differs in the last bits)
    total = 0.0
    for w in weights.flat:
        total += float(w)
    kernel = weights / total
    kernel.setflags(write=False)
    return kernel


def build_kernel(kernel_size: int, filter_type: str = "gaussian") -> np.ndarray:
    """
    Build the smoothing kernel for `filter_type`.
    Only 'gaussian' has a kernel; 'mean' and 'median' are reserved selector values
    and raise ValueError like any other value without a kernel.
    """
    filter_type = str(filter_type).lower()
    if filter_type == "gaussian":
        return gaussian_kernel(kernel_size)
    elif filter_type in FILTER_TYPES:
        raise ValueError(f"filter_type '{filter_type}' is reserved and has no kernel; only 'gaussian' is available.")
    else:
        raise ValueError(f"Unknown filter_type '{filter_type}'. Choose one of {FILTER_TYPES}.")


# --- Convolution ---
def convolve(buffer: PixelBuffer, kernel: np.ndarray, workers: int = 1) -> PixelBuffer:
    """
    Convolve the intensity (R) channel with `kernel` and write the rounded, clamped
    result to R, G, B. Alpha is untouched. Reads only from a copy of the pre-filter
    channel, so the result does not depend on visiting order or on `workers`.
    Mutates and returns `buffer`.
    """
    kernel = np.asarray(kernel, dtype=np.float64)
    if kernel.ndim != 2 or kernel.shape[0] != kernel.shape[1] or kernel.shape[0] % 2 == 0:
        raise InvalidKernelSize(f"Kernel must be square with odd side, got shape {kernel.shape}.")
    k = kernel.shape[0]
    half = k // 2
    H, W = buffer.shape
    if H < k or W < k:
        # every pixel falls inside the excluded margin
        return buffer

    src = buffer.intensity().astype(np.float64)
    px = buffer.pixels()
    out_w = W - 2 * half

    def _band(lo: int, hi: int) -> None:
        acc = np.zeros((hi - lo, out_w), dtype=np.float64)
        # accumulate row-major over the window
        for ky in range(k):
            rows = src[lo - half + ky : hi - half + ky]
            for kx in range(k):
                acc += rows[:, kx : kx + out_w] * kernel[ky, kx]
        px[lo:hi, half : W - half, :3] = to_uint8(acc)[..., None]

    run_row_bands(_band, half, H - half, workers)
    return buffer


def apply_gaussian_filter(buffer: PixelBuffer, kernel_size: int, workers: int = 1) -> PixelBuffer:
    return convolve(buffer, build_kernel(kernel_size, "gaussian"), workers=workers)
