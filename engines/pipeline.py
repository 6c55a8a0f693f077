"""Main resize pipeline: de-gamma, resample, gamma."""

import logging
from typing import Optional

from models.edge import EdgeMethod
from models.image import Image, create_image
from models.resize_result import ResizeResult
from engines.gamma import GammaTables, degamma_image, gamma_image
from engines.resampler import resample_image
from utils.metrics import Timer

logger = logging.getLogger(__name__)


def resize_image(
    image_in: Image,
    image_out: Image,
    edge_method: EdgeMethod,
    tables: GammaTables,
    linear_in: Optional[Image] = None,
    linear_out: Optional[Image] = None,
    timer: Optional[Timer] = None
) -> bool:
    """
    Resize a gamma-encoded 8-bit image into image_out.

    Scaling runs in linear light (RGB or YUV, not R'G'B' or Y'UV), which
    keeps dark regions from being crushed, most visibly when shrinking.
    Working buffers may be passed in so a frame loop can reuse them.
    """
    try:
        if linear_in is None:
            linear_in = create_image(image_in.color_space, image_in.width, image_in.height, 'double')
        if linear_out is None:
            linear_out = create_image(image_out.color_space, image_out.width, image_out.height, 'double')
    except MemoryError:
        logger.error("resize_image(): could not allocate linear working buffers")
        return False

    timer = timer or Timer()

    if not timer.measure('degamma', degamma_image, image_in, linear_in, tables):
        logger.error("Unable to degamma input image")
        return False

    if not timer.measure('resample', resample_image, linear_in, linear_out, edge_method):
        logger.error("Unable to resize image")
        return False

    if not timer.measure('gamma', gamma_image, linear_out, image_out, tables):
        logger.error("Unable to gamma correct output image")
        return False

    logger.debug(
        f"Resized {image_in.width}x{image_in.height} -> {image_out.width}x{image_out.height} "
        f"({image_in.color_space}, {edge_method}) in {timer.total_ms:.2f} ms"
    )
    return True


def resize_to(
    image_in: Image,
    width: int,
    height: int,
    edge_method: EdgeMethod,
    tables: GammaTables
) -> Optional[ResizeResult]:
    """Resize to width x height, returning the output with stage timings or None on failure."""
    try:
        image_out = create_image(image_in.color_space, width, height)
        linear_in = create_image(image_in.color_space, image_in.width, image_in.height, 'double')
        linear_out = create_image(image_in.color_space, width, height, 'double')
    except MemoryError:
        logger.error(f"resize_to(): could not allocate {width}x{height} buffers")
        return None

    timer = Timer()

    if not resize_image(image_in, image_out, edge_method, tables, linear_in, linear_out, timer):
        return None

    return ResizeResult(
        output_image=image_out,
        linear_input=linear_in,
        linear_output=linear_out,
        degamma_time_ms=timer.times_ms.get('degamma', 0.0),
        resample_time_ms=timer.times_ms.get('resample', 0.0),
        gamma_time_ms=timer.times_ms.get('gamma', 0.0),
    )
