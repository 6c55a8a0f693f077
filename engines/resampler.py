"""Two-pass separable Lanczos-2 resampling in the linear double domain."""

import logging
from typing import List, Tuple

import numpy as np

from engines.lanczos import make_contribution_table
from models.contribution_table import ContributionTable
from models.edge import EdgeMethod
from models.image import Image, create_image, copy_image

logger = logging.getLogger(__name__)


def filter_rows(src: np.ndarray, table: ContributionTable) -> np.ndarray:
    """Filter every row of a 2D plane from table.in_size to table.out_size columns."""
    acc = np.zeros((src.shape[0], table.out_size), dtype=np.float64)
    # Accumulate tap by tap; padded taps carry weight 0
    for k in range(table.max_taps):
        acc += src[:, table.indices[:, k]] * table.weights[:, k]
    return np.clip(acc / table.weights_sum, 0.0, 1.0)


def filter_columns(src: np.ndarray, table: ContributionTable) -> np.ndarray:
    """Filter every column of a 2D plane from table.in_size to table.out_size rows."""
    return filter_rows(src.T, table).T


def _horizontal_pass(image_in: Image, out_w: int, edge_method: EdgeMethod) -> Image:
    """Filter every row into a new out_w x in_h working image."""
    image_tmp = create_image(image_in.color_space, out_w, image_in.height, 'double')
    in_w = image_in.width
    if in_w == out_w:
        image_tmp.planes[...] = image_in.planes
        return image_tmp

    table = make_contribution_table(in_w, out_w, edge_method)
    image_tmp.planes[0] = filter_rows(image_in.planes[0], table)

    sub_x, _ = image_in.subsampling
    uv_in_w, uv_rows = image_in.chroma_size
    uv_out_w, _ = image_tmp.chroma_size
    uv_table = table if sub_x == 1 else make_contribution_table(uv_in_w, uv_out_w, edge_method)
    for plane in (1, 2):
        image_tmp.planes[plane, :uv_rows, :uv_out_w] = filter_rows(
            image_in.planes[plane, :uv_rows, :uv_in_w], uv_table
        )
    return image_tmp


def _vertical_pass(image_tmp: Image, out_h: int, edge_method: EdgeMethod) -> List[Tuple[tuple, np.ndarray]]:
    """Filter every column; returns (index, samples) pairs for the output planes."""
    in_h = image_tmp.height
    if in_h == out_h:
        return [(np.s_[...], image_tmp.planes)]

    table = make_contribution_table(in_h, out_h, edge_method)
    results = [(np.s_[0], filter_columns(image_tmp.planes[0], table))]

    _, sub_y = image_tmp.subsampling
    uv_cols, uv_in_h = image_tmp.chroma_size
    uv_out_h = -(-out_h // sub_y)
    uv_table = table if sub_y == 1 else make_contribution_table(uv_in_h, uv_out_h, edge_method)
    for plane in (1, 2):
        results.append((
            np.s_[plane, :uv_out_h, :uv_cols],
            filter_columns(image_tmp.planes[plane, :uv_in_h, :uv_cols], uv_table),
        ))
    return results


def resample_image(image_in: Image, image_out: Image, edge_method: EdgeMethod = 'repeat') -> bool:
    """
    Resize image_in to the dimensions of image_out.

    Horizontal then vertical pass, each with its own contribution tables.
    Subsampled chroma planes get tables sized for the chroma grid. An axis
    whose size does not change is copied rather than filtered. Both images
    must be double precision linear light in the same color space.
    image_out is only written once both passes have succeeded.
    """
    if image_in.precision != 'double' or image_out.precision != 'double':
        logger.error("resample_image(): images must be double precision")
        return False
    if image_in.color_space != image_out.color_space:
        logger.error("resample_image(): images have different color spaces")
        return False

    if image_in.width == image_out.width and image_in.height == image_out.height:
        return copy_image(image_in, image_out)

    try:
        image_tmp = _horizontal_pass(image_in, image_out.width, edge_method)
        results = _vertical_pass(image_tmp, image_out.height, edge_method)
    except MemoryError:
        logger.error("resample_image(): could not allocate working buffers")
        return False

    for index, samples in results:
        image_out.planes[index] = samples
    return True
