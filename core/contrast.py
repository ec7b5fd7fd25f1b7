"""
core/contrast.py

Global histogram equalization over the intensity (R) channel.

Functions:
- build_histogram(buffer) -> 256-bin counts of the R channel
- cumulative_distribution(hist) -> running sum
- build_equalization_lut(cdf, total) -> uint8 lookup table (identity for degenerate histograms)
- equalize_histogram(buffer) -> applies the LUT to R, G, B in place
"""

import logging
import numpy as np

from .pixel_buffer import PixelBuffer, to_uint8

logger = logging.getLogger(__name__)

LEVELS = 256
IDENTITY_LUT = np.arange(LEVELS, dtype=np.uint8)
IDENTITY_LUT.setflags(write=False)


def build_histogram(buffer: PixelBuffer) -> np.ndarray:
    """Count occurrences of each intensity. R == G == B after grayscale, so only R is read."""
    return np.bincount(buffer.intensity().reshape(-1), minlength=LEVELS).astype(np.int64)


def cumulative_distribution(hist: np.ndarray) -> np.ndarray:
    hist = np.asarray(hist, dtype=np.int64)
    if hist.shape != (LEVELS,):
        raise ValueError(f"Histogram must have {LEVELS} bins, got shape {hist.shape}.")
    return np.cumsum(hist)


def build_equalization_lut(cdf: np.ndarray, total: int) -> np.ndarray:
    """
    lut[v] = round((cdf[v] - cdf_min) / (total - cdf_min) * 255)

    cdf_min is the first nonzero CDF entry. When total == cdf_min (every pixel shares
    one intensity) or the image is empty, the identity table is returned instead.
    """
    cdf = np.asarray(cdf, dtype=np.int64)
    nonzero = np.flatnonzero(cdf)
    if nonzero.size == 0:
        logger.debug("Empty histogram; using identity LUT.")
        return IDENTITY_LUT.copy()
    cdf_min = int(cdf[nonzero[0]])
    denom = int(total) - cdf_min
    if denom == 0:
        logger.debug("Degenerate histogram (single intensity, count=%d); using identity LUT.", cdf_min)
        return IDENTITY_LUT.copy()
    # Values below the first occupied level go negative; they are never looked up and clamp to 0.
    scaled = (cdf - cdf_min) / float(denom) * 255.0
    return to_uint8(scaled)


def equalize_histogram(buffer: PixelBuffer) -> PixelBuffer:
    """Equalize R, G, B through the CDF lookup table. Alpha is untouched. Mutates and returns `buffer`."""
    hist = build_histogram(buffer)
    cdf = cumulative_distribution(hist)
    lut = build_equalization_lut(cdf, buffer.pixel_count)
    px = buffer.pixels()
    mapped = lut[px[..., 0]]
    px[..., 0] = mapped
    px[..., 1] = mapped
    px[..., 2] = mapped
    return buffer
