"""Data models: image container, contribution tables, run parameters and results."""

from .edge import EdgeMethod, EDGE_METHODS, resolve_edge, resolve_edges
from .image import Image, create_image, copy_image, COLOR_SPACES, SUBSAMPLING
from .contribution_table import ContributionTable
from .resize_params import ResizeParams, YUV_TYPES
from .resize_result import ResizeResult

__all__ = [
    'EdgeMethod',
    'EDGE_METHODS',
    'resolve_edge',
    'resolve_edges',
    'Image',
    'create_image',
    'copy_image',
    'COLOR_SPACES',
    'SUBSAMPLING',
    'ContributionTable',
    'ResizeParams',
    'YUV_TYPES',
    'ResizeResult',
]
