"""Gamma linearization lookup tables and their application to whole images."""

import logging
from dataclasses import dataclass

import numpy as np

from models.image import Image, PIXMAX

logger = logging.getLogger(__name__)

FWD_GAMMA_LUTSIZE = 256    # 8-bit input only
BWD_GAMMA_LUTSIZE = 4096   # 12 bits: 8 input bits + 4 to avoid banding after linear processing


@dataclass(frozen=True)
class GammaTables:
    """Forward (de-gamma) and backward (gamma) LUTs, built once per run."""

    gamma: float
    forward: np.ndarray
    backward: np.ndarray

    @classmethod
    def build(cls, gamma: float) -> 'GammaTables':
        if gamma <= 0:
            raise ValueError(f"Gamma must be positive, got {gamma}")

        forward = (np.arange(FWD_GAMMA_LUTSIZE, dtype=np.float64) / PIXMAX) ** gamma

        levels = np.arange(BWD_GAMMA_LUTSIZE, dtype=np.float64) / (BWD_GAMMA_LUTSIZE - 1)
        backward = np.floor(np.clip(PIXMAX * levels ** (1.0 / gamma) + 0.5, 0, PIXMAX))
        backward = backward.astype(np.uint8)

        forward.setflags(write=False)
        backward.setflags(write=False)
        return cls(gamma=gamma, forward=forward, backward=backward)


def _check_pair(name: str, image_in: Image, image_out: Image, in_precision: str, out_precision: str) -> bool:
    if image_in.width != image_out.width or image_in.height != image_out.height:
        logger.error(f"{name}(): images have different dimensions")
        return False
    if image_in.precision != in_precision:
        logger.error(f"{name}(): input image must be {in_precision} precision")
        return False
    if image_out.precision != out_precision:
        logger.error(f"{name}(): output image must be {out_precision} precision")
        return False
    if image_in.color_space != image_out.color_space:
        logger.error(f"{name}(): images have different color spaces")
        return False
    return True


def degamma_image(image_in: Image, image_out: Image, tables: GammaTables) -> bool:
    """
    Gamma-encoded 8-bit image to linear-light double image.

    R'G'B' -> RGB on every plane. For Y'UV only luma goes through the curve;
    chroma carries no luminance and is rescaled to [0, 1].
    """
    if not _check_pair('degamma_image', image_in, image_out, 'fixed8', 'double'):
        return False

    src = image_in.planes
    try:
        if image_in.color_space == 'RGB':
            linear = tables.forward[src]
        else:
            linear = np.concatenate([
                tables.forward[src[:1]],
                src[1:].astype(np.float64) / (FWD_GAMMA_LUTSIZE - 1),
            ])
    except MemoryError:
        logger.error("degamma_image(): could not allocate working buffer")
        return False

    image_out.planes[...] = linear
    return True


def gamma_image(image_in: Image, image_out: Image, tables: GammaTables) -> bool:
    """Linear-light double image back to gamma-encoded 8-bit image."""
    if not _check_pair('gamma_image', image_in, image_out, 'double', 'fixed8'):
        return False

    src = image_in.planes
    gamma_planes = 3 if image_in.color_space == 'RGB' else 1
    try:
        lut_index = np.clip(src[:gamma_planes] * (BWD_GAMMA_LUTSIZE - 1) + 0.5, 0, BWD_GAMMA_LUTSIZE - 1)
        encoded = tables.backward[lut_index.astype(np.int64)]
        if gamma_planes == 1:
            chroma = np.clip(src[1:] * (FWD_GAMMA_LUTSIZE - 1) + 0.5, 0, FWD_GAMMA_LUTSIZE - 1)
            encoded = np.concatenate([encoded, chroma.astype(np.uint8)])
    except MemoryError:
        logger.error("gamma_image(): could not allocate working buffer")
        return False

    image_out.planes[...] = encoded
    return True
