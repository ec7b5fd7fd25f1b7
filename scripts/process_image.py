"""
Run the four-stage pipeline on one image and write every output.

Writes into OUTDIR/<image-name>/:
- <base>_grayscale.png, <base>_enhanced.png, <base>_filtered.png (enabled stages only)
- <base>_final.png
- parameters.txt
- comparison.png (with --compare), <base>_results.zip (with --zip)

Usage (from project root):
python -m scripts.process_image data/sample1.png --kernel-size 7 --compare
"""

import argparse
import logging
import os
import sys
import time

from core.config import ProcessingParams, StageConfig
from core.errors import PipelineError, PipelineCancelled
from core.pipeline import run_pipeline
from io_utils.image_handler import read_image, ImageDecodeError
from io_utils.file_utils import save_parameters_txt, save_pipeline_result, zip_results

DEFAULT_OUTDIR = "results"


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Grayscale -> Contrast Enhancement -> Noise Reduction -> Edge Detection"
    )
    p.add_argument("input", type=str, help="Path to the input image")
    p.add_argument("--outdir", type=str, default=DEFAULT_OUTDIR, help="Output folder")

    g_stage = p.add_argument_group("Stages")
    g_stage.add_argument("--no-grayscale", action="store_true")
    g_stage.add_argument("--no-contrast", action="store_true")
    g_stage.add_argument("--no-noise-reduction", action="store_true")
    g_stage.add_argument("--no-edge-detection", action="store_true")

    g_par = p.add_argument_group("Parameters")
    g_par.add_argument("--kernel-size", type=int, default=5, choices=(3, 5, 7, 9, 11))
    g_par.add_argument("--filter-type", type=str, default="gaussian", choices=("gaussian", "mean", "median"))
    g_par.add_argument("--edge-method", type=str, default="sobel", choices=("sobel", "canny"))
    g_par.add_argument("--workers", type=int, default=1, help="Threads for the windowed stages")

    g_out = p.add_argument_group("Output")
    g_out.add_argument("--compare", action="store_true", help="Save a side-by-side comparison figure")
    g_out.add_argument("--zip", action="store_true", help="Zip all outputs")
    g_out.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return p


def process_one_image(path: str, outdir: str, stages: StageConfig, params: ProcessingParams,
                      workers: int = 1, compare: bool = False, make_zip: bool = False,
                      cancel_event=None) -> dict:
    buffer, meta = read_image(path)
    base = os.path.splitext(os.path.basename(path))[0]
    run_dir = os.path.join(outdir, base)

    t0 = time.perf_counter()
    result = run_pipeline(buffer, stages, params, cancel_event=cancel_event, workers=workers)
    elapsed_ms = (time.perf_counter() - t0) * 1000.0

    paths = save_pipeline_result(result, run_dir, base=base)
    record = {"input_path": path, "width": buffer.width, "height": buffer.height, "source_mode": meta["mode"]}
    record.update(stages.to_dict())
    record.update(params.to_dict())
    record["elapsed_ms"] = round(elapsed_ms, 1)
    paths["parameters"] = save_parameters_txt(run_dir, record)

    if compare:
        # matplotlib is only pulled in when a figure is requested
        from visuals.plots import compare_stages
        paths["comparison"] = compare_stages(buffer, result, out_path=os.path.join(run_dir, "comparison.png"))
    if make_zip:
        paths["zip"] = zip_results(run_dir, os.path.join(run_dir, f"{base}_results.zip"))
    return paths


def main(argv=None) -> int:
    args = build_argparser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(message)s')

    stages = StageConfig(
        grayscale=not args.no_grayscale,
        contrast=not args.no_contrast,
        noise_reduction=not args.no_noise_reduction,
        edge_detection=not args.no_edge_detection,
    )

    try:
        params = ProcessingParams(
            kernel_size=args.kernel_size,
            filter_type=args.filter_type,
            edge_method=args.edge_method,
        )
        print("Processing:", args.input)
        paths = process_one_image(
            args.input, args.outdir, stages, params,
            workers=args.workers, compare=args.compare, make_zip=args.zip,
        )
    except (PipelineError, PipelineCancelled, ImageDecodeError, OSError) as e:
        print(f"Error processing image: {e}", file=sys.stderr)
        return 1

    for name, p in paths.items():
        print(f" -> {name}: {p}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
