"""
core/config.py

Explicit run configuration for the pipeline: which stages are enabled and the
processing parameters. Both are immutable values passed in at call time.

`from_mapping` accepts snake_case keys as well as the camelCase names used by
the web front end (kernelSize, filterType, edgeMethod, cannyLow, cannyHigh).
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Tuple

import numpy as np

from .edges import EDGE_METHODS
from .errors import InvalidStageConfig
from .filters import FILTER_TYPES, validate_kernel_size

STAGE_ORDER: Tuple[str, ...] = ("grayscale", "contrast", "noise_reduction", "edge_detection")

_PARAM_ALIASES = {
    "kernelSize": "kernel_size",
    "filterType": "filter_type",
    "edgeMethod": "edge_method",
    "cannyLow": "canny_low",
    "cannyHigh": "canny_high",
}


@dataclass(frozen=True)
class StageConfig:
    """Enable flags for the four stages. Order is fixed by STAGE_ORDER."""

    grayscale: bool = True
    contrast: bool = True
    noise_reduction: bool = True
    edge_detection: bool = True

    def __post_init__(self):
        for name in STAGE_ORDER:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidStageConfig(f"Stage flag '{name}' must be a bool, got {value!r}.")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "StageConfig":
        unknown = set(mapping) - set(STAGE_ORDER)
        if unknown:
            raise InvalidStageConfig(f"Unknown stage name(s): {', '.join(sorted(unknown))}.")
        return cls(**dict(mapping))

    @classmethod
    def all_disabled(cls) -> "StageConfig":
        return cls(False, False, False, False)

    def is_enabled(self, stage: str) -> bool:
        if stage not in STAGE_ORDER:
            raise InvalidStageConfig(f"Unknown stage name '{stage}'.")
        return getattr(self, stage)

    def enabled_stages(self) -> Tuple[str, ...]:
        return tuple(name for name in STAGE_ORDER if getattr(self, name))

    def to_dict(self) -> Dict[str, bool]:
        return asdict(self)


@dataclass(frozen=True)
class ProcessingParams:
    """
    kernel_size : odd int in [3, 11], window side for noise reduction.
    filter_type : 'gaussian' | 'mean' | 'median'  (only gaussian runs)
    edge_method : 'sobel' | 'canny'               (only sobel runs)
    canny_low / canny_high : thresholds kept for the canny selector; unused.
    """

    kernel_size: int = 5
    filter_type: str = "gaussian"
    edge_method: str = "sobel"
    canny_low: int = 50
    canny_high: int = 150

    def __post_init__(self):
        validate_kernel_size(self.kernel_size)
        if self.filter_type not in FILTER_TYPES:
            raise ValueError(f"Unknown filter_type '{self.filter_type}'. Choose one of {FILTER_TYPES}.")
        if self.edge_method not in EDGE_METHODS:
            raise ValueError(f"Unknown edge_method '{self.edge_method}'. Choose one of {EDGE_METHODS}.")
        for name in ("canny_low", "canny_high"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}.")
        if not (0 <= self.canny_low <= self.canny_high <= 255):
            raise ValueError("Canny thresholds must satisfy 0 <= canny_low <= canny_high <= 255.")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ProcessingParams":
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            name = _PARAM_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown processing parameter '{key}'.")
            if name in kwargs:
                raise ValueError(f"Processing parameter '{key}' given twice (as '{name}' and an alias).")
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_STAGES = StageConfig()
DEFAULT_PARAMS = ProcessingParams()
