# test/test_edges.py
import numpy as np
from core.pixel_buffer import PixelBuffer
from core.edges import SOBEL_X, SOBEL_Y, sobel_gradients, sobel_edge_detection, gradient_magnitude

def _gray(values, alpha=255):
    values = np.asarray(values, dtype=np.uint8)
    rgba = np.stack([values, values, values, np.full_like(values, alpha)], axis=-1)
    return PixelBuffer.from_array(rgba)

def test_kernels():
    assert SOBEL_X.tolist() == [[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]]
    assert SOBEL_Y.tolist() == [[-1, -2, -1], [0, 0, 0], [1, 2, 1]]
    assert np.array_equal(SOBEL_Y, SOBEL_X.T)

def test_vertical_step():
    img = np.tile(np.array([0, 0, 10, 10, 10], dtype=np.uint8), (5, 1))
    buf = _gray(img, alpha=7)
    gx, gy = sobel_gradients(buf)
    assert gx.shape == (3, 3)
    assert gx[0].tolist() == [40, 40, 0]
    assert np.all(gy == 0)

    sobel_edge_detection(buf)
    px = buf.pixels()
    assert px[1:4, 1:4, 0].tolist() == [[40, 40, 0]] * 3
    assert np.all(px[1:4, 1:4, 3] == 255)
    # border ring keeps its values, alpha included
    assert np.array_equal(px[0, :, 0], img[0])
    assert np.all(px[0, :, 3] == 7)
    assert np.all(px[:, 0, 3] == 7)
    assert np.all(px[4, :, 3] == 7)

def test_magnitude_combines_axes():
    img = np.zeros((3, 3), dtype=np.uint8)
    img[1, 2] = 15  # gx = 2*15
    img[2, 1] = 20  # gy = 2*20
    buf = _gray(img)
    gx, gy = sobel_gradients(buf)
    assert (gx[0, 0], gy[0, 0]) == (30, 40)
    sobel_edge_detection(buf)
    assert buf.pixels()[1, 1, :3].tolist() == [50, 50, 50]

def test_magnitude_clamped():
    img = np.zeros((3, 3), dtype=np.uint8)
    img[:, 2] = 255
    buf = sobel_edge_detection(_gray(img))
    assert buf.pixels()[1, 1, 0] == 255
    assert gradient_magnitude(np.array([3]), np.array([4])).tolist() == [5.0]

def test_reads_pre_stage_copy():
    rng = np.random.default_rng(7)
    img = rng.integers(0, 256, size=(9, 8), dtype=np.uint8)
    buf = _gray(img)
    gx, gy = sobel_gradients(buf)
    sobel_edge_detection(buf)
    expected = np.clip(np.floor(np.sqrt(gx.astype(float) ** 2 + gy.astype(float) ** 2) + 0.5), 0, 255)
    assert np.array_equal(buf.pixels()[1:-1, 1:-1, 0], expected.astype(np.uint8))

def test_border_untouched_random():
    rng = np.random.default_rng(8)
    rgba = rng.integers(0, 256, size=(10, 12, 4), dtype=np.uint8)
    buf = sobel_edge_detection(PixelBuffer.from_array(rgba))
    px = buf.pixels()
    for edge_px, edge_ref in [(px[0], rgba[0]), (px[-1], rgba[-1]), (px[:, 0], rgba[:, 0]), (px[:, -1], rgba[:, -1])]:
        assert np.array_equal(edge_px, edge_ref)

def test_tiny_image_unchanged():
    buf = _gray(np.array([[1, 200], [50, 9]]), alpha=3)
    before = buf.copy()
    sobel_edge_detection(buf)
    assert buf == before
    gx, gy = sobel_gradients(buf)
    assert gx.size == 0 and gy.size == 0

def test_workers_do_not_change_result():
    rng = np.random.default_rng(9)
    img = rng.integers(0, 256, size=(33, 21), dtype=np.uint8)
    a = sobel_edge_detection(_gray(img), workers=1)
    b = sobel_edge_detection(_gray(img), workers=5)
    assert a == b
