# visuals/__init__.py
"""
Visual helpers for the image-processing lab.
Provides plotting and export utilities used by scripts.
"""
from .plots import (
    compare_stages,
    plot_histogram,
    plot_kernel,
    fig_to_array,
)
__all__ = [
    "compare_stages",
    "plot_histogram",
    "plot_kernel",
    "fig_to_array",
]
