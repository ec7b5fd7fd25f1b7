# io_utils/file_utils.py
"""
File naming, parameter recording, result export and zipping helpers.
"""

import os
import datetime
import zipfile
from typing import Dict, Optional

from core.pipeline import PipelineResult
from .image_handler import save_image

DOWNLOAD_NAME = "processed-image.png"


def make_result_filename(
    projname: str,
    input_path: str,
    stage: str,
    kernel_size: int,
    ext: str = "png",
    outdir: str = ".",
    timestamp: Optional[str] = None,
) -> str:
    base = os.path.splitext(os.path.basename(input_path))[0]
    if timestamp is None:
        timestamp = datetime.datetime.now().strftime("%Y%m%dT%H%M%S")
    safe_stage = str(stage).replace(" ", "_")
    fname = f"{projname}_{base}_{safe_stage}_k-{int(kernel_size)}_{timestamp}.{ext}"
    os.makedirs(outdir, exist_ok=True)
    return os.path.join(outdir, fname)


def save_parameters_txt(outdir: str, params: Dict):
    os.makedirs(outdir, exist_ok=True)
    path = os.path.join(outdir, "parameters.txt")
    with open(path, "w", encoding="utf-8") as f:
        for k, v in params.items():
            f.write(f"{k}: {v}\n")
    return path


def save_pipeline_result(result: PipelineResult, outdir: str, base: Optional[str] = None) -> Dict[str, str]:
    """
    Write each intermediate as <base>_<stage>.png and the final image.
    The final image is named `processed-image.png` unless `base` is given.
    Returns {stage_or_'final': path}.
    """
    os.makedirs(outdir, exist_ok=True)
    paths = {}
    for stage, buf in result.intermediates.items():
        name = f"{base}_{stage}.png" if base else f"{stage}.png"
        paths[stage] = save_image(os.path.join(outdir, name), buf)
    final_name = f"{base}_final.png" if base else DOWNLOAD_NAME
    paths["final"] = save_image(os.path.join(outdir, final_name), result.final)
    return paths


def zip_results(dir_to_zip: str, zip_path: str):
    with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
        for root, _, files in os.walk(dir_to_zip):
            for file in files:
                full = os.path.join(root, file)
                if os.path.abspath(full) == os.path.abspath(zip_path):
                    continue
                arcname = os.path.relpath(full, start=dir_to_zip)
                zf.write(full, arcname)
    return zip_path
