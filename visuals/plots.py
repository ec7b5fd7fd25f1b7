"""
visuals/plots.py

Plotting utilities for pipeline outputs: stage comparison grid, intensity
histogram with CDF, and convolution kernel heat map.

APIs:
- compare_stages(original, result, out_path=None, titles=None)
- plot_histogram(buffer, out_path=None, cdf=True, title=None)
- plot_kernel(kernel, out_path=None, title=None, cmap='viridis')
- fig_to_array(fig) -> np.ndarray (H,W,3) uint8

Notes:
- This module uses matplotlib. It does not modify core behavior.
- If out_path is None, functions will return the matplotlib Figure object (caller can save or display).
"""

from typing import Dict, Optional
import os
import numpy as np
import matplotlib.pyplot as plt

from core.contrast import build_histogram, cumulative_distribution
from core.pipeline import PipelineResult
from core.pixel_buffer import PixelBuffer

STAGE_TITLES = {
    "grayscale": "Grayscale",
    "enhanced": "Contrast Enhanced",
    "filtered": "Noise Reduced",
}


# Helper to ensure outdir exists
def _ensure_outdir(out_path: Optional[str]):
    if out_path is None:
        return None
    d = os.path.dirname(out_path)
    if d:
        os.makedirs(d, exist_ok=True)
    return out_path


def _save_or_return(fig: plt.Figure, out_path: Optional[str], dpi: int = 100):
    if out_path is not None:
        _ensure_outdir(out_path)
        fig.savefig(out_path, dpi=dpi, bbox_inches="tight", pad_inches=0.05)
        plt.close(fig)
        return out_path
    else:
        return fig


def fig_to_array(fig: plt.Figure) -> np.ndarray:
    """
    Convert a Matplotlib figure to an HxWx3 uint8 RGB numpy array.
    """
    fig.canvas.draw()
    rgba = np.asarray(fig.canvas.buffer_rgba())
    return rgba[..., :3].copy()


def _show_buffer(ax, buffer: PixelBuffer, title: str):
    ax.imshow(buffer.pixels(), interpolation="nearest")
    ax.set_title(title)
    ax.axis("off")


def compare_stages(
    original: PixelBuffer,
    result: PipelineResult,
    out_path: Optional[str] = None,
    titles: Optional[Dict[str, str]] = None,
):
    """
    Original | each recorded intermediate | Final, in one row.
    """
    names = dict(STAGE_TITLES)
    if titles:
        names.update(titles)
    panels = [("Original", original)]
    for stage, buf in result.intermediates.items():
        panels.append((names.get(stage, stage), buf))
    panels.append((names.get("final", "Final"), result.final))

    fig, axs = plt.subplots(1, len(panels), figsize=(4 * len(panels), 4.5))
    axs = np.atleast_1d(axs)
    for ax, (title, buf) in zip(axs, panels):
        _show_buffer(ax, buf, title)
    return _save_or_return(fig, out_path, dpi=150)


def plot_histogram(
    buffer: PixelBuffer,
    out_path: Optional[str] = None,
    cdf: bool = True,
    title: Optional[str] = "Intensity Histogram",
):
    """
    Bar chart of the 256-bin R-channel histogram, with the CDF (scaled to the
    histogram peak) overlaid when `cdf` is True.
    """
    hist = build_histogram(buffer)
    levels = np.arange(hist.size)
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.bar(levels, hist, width=1.0, color="0.4")
    if cdf:
        c = cumulative_distribution(hist).astype(np.float64)
        peak = float(hist.max()) if hist.max() > 0 else 1.0
        scale = peak / c[-1] if c[-1] > 0 else 0.0
        ax.plot(levels, c * scale, color="tab:red", label="CDF (scaled)")
        ax.legend(loc="upper left")
    ax.set_xlim(0, 255)
    ax.set_xlabel("Intensity")
    ax.set_ylabel("Count")
    if title:
        ax.set_title(title)
    return _save_or_return(fig, out_path)


def plot_kernel(
    kernel: np.ndarray,
    out_path: Optional[str] = None,
    title: Optional[str] = "Convolution Kernel",
    cmap: str = "viridis",
):
    k = np.asarray(kernel, dtype=np.float64)
    fig, ax = plt.subplots(figsize=(4, 4))
    im = ax.imshow(k, cmap=cmap, interpolation="nearest")
    fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    if title:
        ax.set_title(f"{title} ({k.shape[0]}x{k.shape[1]})")
    ax.set_xticks([])
    ax.set_yticks([])
    return _save_or_return(fig, out_path)
