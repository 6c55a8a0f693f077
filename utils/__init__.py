"""Shared utilities."""

from .metrics import compute_psnr_ssim, Timer
from .test_images import (
    generate_solid,
    generate_checkerboard,
    generate_gradient,
    generate_chroma_stripes,
)
from .file_info import ImageFileInfo, detect_file_type, detect_frames, get_file_info
from .image_io import (
    load_image,
    save_image,
    load_bmp,
    save_bmp,
    load_raw_yuv,
    save_raw_yuv,
    array_to_image,
    image_to_array,
)

__all__ = [
    'compute_psnr_ssim',
    'Timer',
    'generate_solid',
    'generate_checkerboard',
    'generate_gradient',
    'generate_chroma_stripes',
    'ImageFileInfo',
    'detect_file_type',
    'detect_frames',
    'get_file_info',
    'load_image',
    'save_image',
    'load_bmp',
    'save_bmp',
    'load_raw_yuv',
    'save_raw_yuv',
    'array_to_image',
    'image_to_array',
]
