"""
core/errors.py

Exception types raised by the processing core.

All structural input problems derive from PipelineError, which is a ValueError
so callers can keep catching the broad type.
"""


class PipelineError(ValueError):
    """Base class for invalid input handed to the processing core."""


class InvalidDimensions(PipelineError):
    """Width/height are non-positive or do not match the sample count."""


class InvalidKernelSize(PipelineError):
    """Kernel size is even, non-integer, or outside [3, 11]."""


class InvalidStageConfig(PipelineError):
    """Unknown stage name or non-boolean enable flag."""


class PipelineCancelled(RuntimeError):
    """Raised between stages when the caller's cancel event is set."""
