"""
core/pipeline.py

Runs the fixed four-stage pipeline on one PixelBuffer:
  1) grayscale        -> snapshot 'grayscale'
  2) contrast         -> snapshot 'enhanced'
  3) noise_reduction  -> snapshot 'filtered'
  4) edge_detection   -> final only

Disabled stages are skipped and leave the buffer unchanged. The caller's buffer is
never modified: the pipeline works on its own copy and every snapshot is an
independent, read-only deep copy, so neither later stages nor callers can alter a
recorded intermediate. The final buffer is also returned read-only.

API:
- run_pipeline(buffer, stages=None, params=None, cancel_event=None, workers=1) -> PipelineResult
- Pipeline(stages, params, workers=1).run(buffer, cancel_event=None)

cancel_event is any object with an is_set() method (typically threading.Event);
it is checked before each stage and raises PipelineCancelled when set.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple
import logging
import time

from .config import DEFAULT_PARAMS, DEFAULT_STAGES, STAGE_ORDER, ProcessingParams, StageConfig
from .contrast import equalize_histogram
from .edges import sobel_edge_detection
from .errors import InvalidDimensions, PipelineCancelled
from .filters import apply_gaussian_filter
from .grayscale import rgb_to_grayscale
from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# stage name -> snapshot key (edge detection produces the final image instead)
SNAPSHOT_KEYS: Dict[str, Optional[str]] = {
    "grayscale": "grayscale",
    "contrast": "enhanced",
    "noise_reduction": "filtered",
    "edge_detection": None,
}


@dataclass(frozen=True)
class PipelineResult:
    final: PixelBuffer
    intermediates: Mapping[str, PixelBuffer] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if not isinstance(self.intermediates, MappingProxyType):
            object.__setattr__(self, "intermediates", MappingProxyType(dict(self.intermediates)))

    @property
    def stage_names(self) -> Tuple[str, ...]:
        return tuple(self.intermediates)


def _stage_functions(params: ProcessingParams, workers: int) -> Dict[str, Callable[[PixelBuffer], PixelBuffer]]:
    if params.filter_type != "gaussian":
        logger.warning("filter_type '%s' is not wired; using gaussian.", params.filter_type)
    if params.edge_method != "sobel":
        logger.warning("edge_method '%s' is not wired; using sobel.", params.edge_method)
    return {
        "grayscale": rgb_to_grayscale,
        "contrast": equalize_histogram,
        "noise_reduction": lambda buf: apply_gaussian_filter(buf, params.kernel_size, workers=workers),
        "edge_detection": lambda buf: sobel_edge_detection(buf, workers=workers),
    }


def run_pipeline(
    buffer: PixelBuffer,
    stages: Optional[StageConfig] = None,
    params: Optional[ProcessingParams] = None,
    cancel_event=None,
    workers: int = 1,
) -> PipelineResult:
    """
    Run every enabled stage in order and collect snapshots.

    Validation (buffer shape, stage flags, kernel size) happens before any stage
    runs. Raises PipelineCancelled if cancel_event is set before a stage starts.
    """
    if not isinstance(buffer, PixelBuffer):
        raise InvalidDimensions(f"Expected a PixelBuffer, got {type(buffer).__name__}.")
    buffer.validate()
    stages = DEFAULT_STAGES if stages is None else stages
    params = DEFAULT_PARAMS if params is None else params
    if not isinstance(stages, StageConfig):
        stages = StageConfig.from_mapping(stages)
    if not isinstance(params, ProcessingParams):
        params = ProcessingParams.from_mapping(params)

    funcs = _stage_functions(params, workers)
    current = buffer.copy()
    intermediates: Dict[str, PixelBuffer] = {}

    logger.debug(
        "Pipeline start: %dx%d, stages=%s, kernel_size=%d",
        buffer.width, buffer.height, ",".join(stages.enabled_stages()) or "none", params.kernel_size,
    )
    for name in STAGE_ORDER:
        if not stages.is_enabled(name):
            logger.debug("Stage %s skipped.", name)
            continue
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Pipeline cancelled before stage %s.", name)
            raise PipelineCancelled(f"Cancelled before stage '{name}'.")
        t0 = time.perf_counter()
        current = funcs[name](current)
        logger.debug("Stage %s done in %.1f ms.", name, (time.perf_counter() - t0) * 1000.0)
        key = SNAPSHOT_KEYS[name]
        if key is not None:
            intermediates[key] = current.frozen_copy()

    current.samples.setflags(write=False)
    return PipelineResult(final=current, intermediates=intermediates)


class Pipeline:
    """Stage config and params bound once, applied to any number of buffers."""

    def __init__(
        self,
        stages: Optional[StageConfig] = None,
        params: Optional[ProcessingParams] = None,
        workers: int = 1,
    ):
        self.stages = DEFAULT_STAGES if stages is None else stages
        self.params = DEFAULT_PARAMS if params is None else params
        self.workers = workers

    def run(self, buffer: PixelBuffer, cancel_event=None) -> PipelineResult:
        return run_pipeline(buffer, self.stages, self.params, cancel_event=cancel_event, workers=self.workers)

    def __repr__(self) -> str:
        return f"Pipeline(stages={self.stages!r}, params={self.params!r}, workers={self.workers})"
