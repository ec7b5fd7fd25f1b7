"""
core/pixel_buffer.py

The raster shared by every pipeline stage: width, height and a flat uint8
sample array holding interleaved RGBA, row-major.

API:
- PixelBuffer(width, height, samples)
- PixelBuffer.from_array(arr)   (H,W,4) / (H,W,3) / (H,W) uint8
- PixelBuffer.blank(width, height, rgba=(0, 0, 0, 255))
- buf.pixels() -> (H,W,4) view over the same storage
- buf.copy()   -> independent deep copy
"""

from typing import Sequence, Tuple, Union
import numpy as np

from .errors import InvalidDimensions

CHANNELS = 4


def _check_dimension(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidDimensions(f"{name} must be an integer, got {value!r}.")
    if value <= 0:
        raise InvalidDimensions(f"{name} must be positive, got {value}.")
    return int(value)


def _as_samples(samples) -> np.ndarray:
    """
    Coerce samples to a flat, freshly allocated uint8 array (never a view of the input).
    Integer inputs outside 0..255 are clamped; floats are rounded half-up first.
    """
    arr = np.asarray(samples)
    if arr.dtype == np.uint8:
        return arr.reshape(-1).copy()
    if np.issubdtype(arr.dtype, np.floating):
        arr = np.floor(arr + 0.5)
    return np.clip(arr.reshape(-1), 0, 255).astype(np.uint8)


class PixelBuffer:
    """8-bit RGBA raster. Stages mutate `samples` in place."""

    __slots__ = ("width", "height", "samples")

    def __init__(self, width: int, height: int, samples: Union[Sequence[int], np.ndarray]):
        self.width = _check_dimension("width", width)
        self.height = _check_dimension("height", height)
        self.samples = _as_samples(samples)
        self.validate()

    # --- constructors ---
    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        """
        Build a buffer from an image array.
        (H,W,4) is taken as RGBA, (H,W,3) gets opaque alpha, (H,W) is replicated to RGB.
        """
        arr = np.asarray(arr)
        if arr.ndim == 2:
            rgb = np.repeat(arr[..., None], 3, axis=2)
            arr = np.concatenate([rgb, np.full(arr.shape + (1,), 255, dtype=arr.dtype)], axis=2)
        elif arr.ndim == 3 and arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=arr.dtype)
            arr = np.concatenate([arr, alpha], axis=2)
        elif not (arr.ndim == 3 and arr.shape[2] == CHANNELS):
            raise InvalidDimensions(f"Expected HxW, HxWx3 or HxWx4 array, got shape {arr.shape}.")
        height, width = arr.shape[0], arr.shape[1]
        return cls(width, height, arr.reshape(-1))

    @classmethod
    def blank(cls, width: int, height: int, rgba: Tuple[int, int, int, int] = (0, 0, 0, 255)) -> "PixelBuffer":
        width = _check_dimension("width", width)
        height = _check_dimension("height", height)
        samples = np.tile(np.asarray(rgba, dtype=np.uint8), width * height)
        return cls(width, height, samples)

    # --- invariants ---
    def validate(self) -> None:
        expected = self.width * self.height * CHANNELS
        if self.samples.ndim != 1 or self.samples.size != expected:
            raise InvalidDimensions(
                f"Sample count {self.samples.size} does not match {self.width}x{self.height}x{CHANNELS} = {expected}."
            )
        if self.samples.dtype != np.uint8:
            raise InvalidDimensions(f"Samples must be uint8, got {self.samples.dtype}.")

    # --- views / copies ---
    @property
    def shape(self) -> Tuple[int, int]:
        return (self.height, self.width)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def pixels(self) -> np.ndarray:
        """(H, W, 4) view sharing storage with `samples`."""
        return self.samples.reshape(self.height, self.width, CHANNELS)

    def intensity(self) -> np.ndarray:
        """(H, W) view of the R channel, the intensity plane after grayscale."""
        return self.pixels()[..., 0]

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.samples)

    def frozen_copy(self) -> "PixelBuffer":
        """Deep copy whose samples are read-only; writes raise ValueError."""
        dup = self.copy()
        dup.samples.setflags(write=False)
        return dup

    @property
    def is_frozen(self) -> bool:
        return not self.samples.flags.writeable

    def to_array(self) -> np.ndarray:
        """Independent (H, W, 4) uint8 array."""
        return self.pixels().copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.samples, other.samples)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round non-negative values to nearest, ties upward (ties away from zero for x >= 0)."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Round then clamp to 0..255 and cast."""
    return np.clip(round_half_up(values), 0.0, 255.0).astype(np.uint8)
