# test/test_grayscale.py
import numpy as np
from core.pixel_buffer import PixelBuffer
from core.grayscale import rgb_to_grayscale, luminosity

def _buf(pixels):
    return PixelBuffer.from_array(np.array(pixels, dtype=np.uint8))

def test_luminosity_weights():
    buf = _buf([[[255, 0, 0, 10], [0, 255, 0, 20], [0, 0, 255, 30], [10, 20, 30, 40]]])
    rgb_to_grayscale(buf)
    px = buf.pixels()[0]
    assert px[:, 0].tolist() == [76, 150, 29, 18]
    # alpha untouched
    assert px[:, 3].tolist() == [10, 20, 30, 40]

def test_channels_equal_after_conversion():
    rng = np.random.default_rng(0)
    buf = PixelBuffer.from_array(rng.integers(0, 256, size=(9, 7, 4), dtype=np.uint8))
    alpha = buf.pixels()[..., 3].copy()
    out = rgb_to_grayscale(buf)
    assert out is buf
    px = buf.pixels()
    assert np.array_equal(px[..., 0], px[..., 1])
    assert np.array_equal(px[..., 1], px[..., 2])
    assert np.array_equal(px[..., 3], alpha)

def test_grayscale_idempotent():
    rng = np.random.default_rng(1)
    buf = PixelBuffer.from_array(rng.integers(0, 256, size=(6, 6, 4), dtype=np.uint8))
    once = rgb_to_grayscale(buf).copy()
    twice = rgb_to_grayscale(buf)
    assert twice == once

def test_luminosity_extremes():
    assert luminosity(np.array([[0, 0, 0], [255, 255, 255]])).tolist() == [0, 255]
