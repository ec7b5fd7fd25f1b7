"""
Core package init for the image-processing lab pipeline.
Exposes public modules for import in tests and scripts.
"""
from .config import DEFAULT_PARAMS, DEFAULT_STAGES, STAGE_ORDER, ProcessingParams, StageConfig
from .errors import (
    InvalidDimensions,
    InvalidKernelSize,
    InvalidStageConfig,
    PipelineCancelled,
    PipelineError,
)
from .pipeline import Pipeline, PipelineResult, run_pipeline
from .pixel_buffer import PixelBuffer

__all__ = [
    "pixel_buffer", "grayscale", "contrast", "filters", "edges", "pipeline", "config",
    "PixelBuffer", "Pipeline", "PipelineResult", "run_pipeline",
    "StageConfig", "ProcessingParams", "STAGE_ORDER", "DEFAULT_STAGES", "DEFAULT_PARAMS",
    "PipelineError", "InvalidDimensions", "InvalidKernelSize", "InvalidStageConfig", "PipelineCancelled",
]
