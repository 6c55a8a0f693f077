"""Resize engines - pure computation, no file I/O."""

from .color_space import rgb_to_yuv, yuv_to_rgb, subsample_chroma, upsample_chroma, convert_image
from .gamma import GammaTables, degamma_image, gamma_image
from .lanczos import sinc, lanczos2, make_contribution_table
from .resampler import resample_image
from .pipeline import resize_image, resize_to

__all__ = [
    'rgb_to_yuv',
    'yuv_to_rgb',
    'subsample_chroma',
    'upsample_chroma',
    'convert_image',
    'GammaTables',
    'degamma_image',
    'gamma_image',
    'sinc',
    'lanczos2',
    'make_contribution_table',
    'resample_image',
    'resize_image',
    'resize_to',
]
