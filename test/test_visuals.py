import os
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from core.pixel_buffer import PixelBuffer
from core.config import StageConfig
from core.filters import gaussian_kernel
from core.pipeline import run_pipeline
from visuals.plots import compare_stages, plot_histogram, plot_kernel, fig_to_array

def _rgba(h=16, w=16, seed=0):
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8))

def test_compare_stages_saves(tmp_path):
    buf = _rgba()
    result = run_pipeline(buf)
    p = str(tmp_path / "cmp" / "comparison.png")
    assert compare_stages(buf, result, out_path=p) == p
    assert os.path.exists(p)

def test_compare_stages_panel_count():
    buf = _rgba()
    result = run_pipeline(buf, StageConfig(contrast=False))
    fig = compare_stages(buf, result)
    # original + grayscale + filtered + final
    assert len(fig.axes) == 4
    assert [ax.get_title() for ax in fig.axes] == ["Original", "Grayscale", "Noise Reduced", "Final"]
    plt.close(fig)

def test_compare_stages_no_intermediates():
    buf = _rgba()
    fig = compare_stages(buf, run_pipeline(buf, StageConfig.all_disabled()))
    assert len(fig.axes) == 2
    plt.close(fig)

def test_plot_histogram_and_kernel(tmp_path):
    buf = _rgba()
    p1 = str(tmp_path / "hist.png")
    p2 = str(tmp_path / "kernel.png")
    assert plot_histogram(buf, out_path=p1) == p1
    assert plot_kernel(gaussian_kernel(7), out_path=p2) == p2
    assert os.path.exists(p1)
    assert os.path.exists(p2)

def test_fig_to_array():
    fig = plot_histogram(PixelBuffer.blank(4, 4, (0, 0, 0, 255)), cdf=False)
    arr = fig_to_array(fig)
    plt.close(fig)
    assert arr.ndim == 3 and arr.shape[2] == 3
    assert arr.dtype == np.uint8
