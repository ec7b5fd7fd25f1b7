# test/test_config.py
import numpy as np
import pytest
from core.config import StageConfig, ProcessingParams, STAGE_ORDER, DEFAULT_PARAMS, DEFAULT_STAGES
from core.errors import InvalidStageConfig, InvalidKernelSize

def test_defaults():
    assert DEFAULT_STAGES.enabled_stages() == STAGE_ORDER
    assert DEFAULT_PARAMS.kernel_size == 5
    assert DEFAULT_PARAMS.filter_type == "gaussian"
    assert DEFAULT_PARAMS.edge_method == "sobel"
    assert (DEFAULT_PARAMS.canny_low, DEFAULT_PARAMS.canny_high) == (50, 150)

def test_stage_order_is_fixed():
    stages = StageConfig.from_mapping({"edge_detection": True, "grayscale": False, "contrast": True, "noise_reduction": False})
    assert stages.enabled_stages() == ("contrast", "edge_detection")

def test_stage_config_validation():
    with pytest.raises(InvalidStageConfig):
        StageConfig.from_mapping({"sharpen": True})
    with pytest.raises(InvalidStageConfig):
        StageConfig(grayscale=1)
    with pytest.raises(InvalidStageConfig):
        StageConfig().is_enabled("blur")

def test_stage_config_is_frozen():
    with pytest.raises(Exception):
        StageConfig().grayscale = False

def test_params_from_camel_case():
    p = ProcessingParams.from_mapping({"kernelSize": 9, "filterType": "mean", "edgeMethod": "canny",
                                       "cannyLow": 10, "cannyHigh": 20})
    assert p == ProcessingParams(kernel_size=9, filter_type="mean", edge_method="canny", canny_low=10, canny_high=20)
    assert p.to_dict()["kernel_size"] == 9

@pytest.mark.parametrize("kwargs,exc", [
    ({"kernel_size": 6}, InvalidKernelSize),
    ({"kernel_size": 13}, InvalidKernelSize),
    ({"filter_type": "bilateral"}, ValueError),
    ({"edge_method": "prewitt"}, ValueError),
    ({"canny_low": 200, "canny_high": 100}, ValueError),
    ({"canny_low": "10"}, ValueError),
    ({"canny_high": 150.0}, ValueError),
    ({"canny_low": True}, ValueError),
])
def test_params_validation(kwargs, exc):
    with pytest.raises(exc):
        ProcessingParams(**kwargs)

def test_params_unknown_key():
    with pytest.raises(ValueError):
        ProcessingParams.from_mapping({"sigma": 2.0})

def test_params_string_thresholds_rejected():
    with pytest.raises(ValueError, match="canny_low"):
        ProcessingParams.from_mapping({"cannyLow": "10", "cannyHigh": 150})

def test_params_numpy_int_thresholds_accepted():
    p = ProcessingParams(canny_low=np.int64(10), canny_high=np.uint8(200))
    assert p.canny_low == 10

@pytest.mark.parametrize("mapping", [
    {"kernelSize": 5, "kernel_size": 7},
    {"filter_type": "gaussian", "filterType": "median"},
    {"cannyHigh": 150, "canny_high": 150},
])
def test_params_duplicate_alias_rejected(mapping):
    with pytest.raises(ValueError, match="twice"):
        ProcessingParams.from_mapping(mapping)

def test_round_trip_dicts():
    assert StageConfig.from_mapping(StageConfig(contrast=False).to_dict()) == StageConfig(contrast=False)
    assert ProcessingParams.from_mapping(ProcessingParams(kernel_size=3).to_dict()) == ProcessingParams(kernel_size=3)
