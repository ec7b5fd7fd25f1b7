# io_utils/__init__.py
"""
I/O helpers package for the image-processing lab.
"""
from .image_handler import read_image, save_image, encode_data_url, detect_is_grayscale, ImageDecodeError
from .file_utils import make_result_filename, save_parameters_txt, save_pipeline_result, zip_results

__all__ = [
    "read_image",
    "save_image",
    "encode_data_url",
    "detect_is_grayscale",
    "ImageDecodeError",
    "make_result_filename",
    "save_parameters_txt",
    "save_pipeline_result",
    "zip_results",
]
