"""Color space conversion and chroma subsampling."""

import logging
from typing import Tuple

import numpy as np

from models.edge import resolve_edges
from models.image import Image, ColorSpace, SUBSAMPLING, PIXMAX, copy_image

logger = logging.getLogger(__name__)

# 8-bit R'G'B' (0-255) to Y'CbCr Rec.601, coefficients x256, last column is the offset
RGB_TO_YUV601 = np.array([
    [65.738, 129.057, 25.064, 16.0],
    [-37.946, -74.494, 112.439, 128.0],
    [112.439, -94.154, -18.285, 128.0],
])

# Y'CbCr Rec.601 to 8-bit R'G'B', offsets are removed before the multiply
YUV601_TO_RGB = np.array([
    [298.082, 0.0, 408.583, -16.0],
    [298.082, -100.291, -208.120, -128.0],
    [298.082, 516.411, 0.0, -128.0],
])

YUV_SPACES = ('YUV444', 'YUV422', 'YUV420')


def _to_fixed8(values: np.ndarray) -> np.ndarray:
    """Round half up and clamp to [0, 255]."""
    return np.floor(np.clip(values + 0.5, 0, PIXMAX)).astype(np.uint8)


def rgb_to_yuv(rgb: np.ndarray) -> np.ndarray:
    """
    RGB to full-resolution YUV (Rec.601) on a (3, ...) uint8 array.

    Only clamps to 0..255, not the 16..235 / 16..240 broadcast ranges,
    so excursions survive later processing.
    """
    R, G, B = (rgb[i].astype(np.float64) for i in range(3))
    m = RGB_TO_YUV601
    out = [
        (m[c, 0] * R + m[c, 1] * G + m[c, 2] * B) / 256.0 + m[c, 3]
        for c in range(3)
    ]
    return _to_fixed8(np.stack(out))


def yuv_to_rgb(yuv: np.ndarray) -> np.ndarray:
    """Full-resolution YUV (Rec.601) to RGB on a (3, ...) uint8 array."""
    m = YUV601_TO_RGB
    Y, U, V = (yuv[i].astype(np.float64) + m[i, 3] for i in range(3))
    out = [
        (m[c, 0] * Y + m[c, 1] * U + m[c, 2] * V) / 256.0
        for c in range(3)
    ]
    return _to_fixed8(np.stack(out))


def subsample_chroma(chroma: np.ndarray, color_space: ColorSpace) -> np.ndarray:
    """
    Downsample one full-resolution uint8 chroma plane.

    4:2:2 takes a (1, 2, 1)/4 horizontal average centred on each even column.
    4:2:0 takes the equal-weight mean of each 2x2 block. Both round with +2
    before the integer divide and replicate edge samples.
    """
    if color_space in ('RGB', 'YUV444'):
        return chroma.copy()

    h, w = chroma.shape
    c = chroma.astype(np.int32)
    xs = np.arange(0, w, 2)

    if color_space == 'YUV422':
        left = resolve_edges(xs - 1, w, 'repeat')
        right = resolve_edges(xs + 1, w, 'repeat')
        sub = (c[:, left] + 2 * c[:, xs] + c[:, right] + 2) // 4
    elif color_space == 'YUV420':
        ys = np.arange(0, h, 2)
        xs1 = resolve_edges(xs + 1, w, 'repeat')
        ys1 = resolve_edges(ys + 1, h, 'repeat')
        sub = (c[np.ix_(ys, xs)] + c[np.ix_(ys, xs1)] +
               c[np.ix_(ys1, xs)] + c[np.ix_(ys1, xs1)] + 2) // 4
    else:
        raise ValueError(f"Unknown subsampling mode: {color_space}")

    return sub.astype(np.uint8)


def upsample_chroma(chroma: np.ndarray, color_space: ColorSpace, shape: Tuple[int, int]) -> np.ndarray:
    """Nearest-neighbour expansion of a chroma grid to the luma grid."""
    sub_x, sub_y = SUBSAMPLING[color_space]
    h, w = shape
    ys = np.arange(h) // sub_y
    xs = np.arange(w) // sub_x
    return chroma[np.ix_(ys, xs)]


def _rgb_image_to_yuv(image_in: Image, image_out: Image) -> bool:
    try:
        yuv444 = rgb_to_yuv(image_in.planes)
        if image_out.color_space != 'YUV444':
            chroma = [subsample_chroma(yuv444[plane], image_out.color_space) for plane in (1, 2)]
    except MemoryError:
        logger.error("convert_image(): could not allocate YUV working buffers")
        return False

    if image_out.color_space == 'YUV444':
        image_out.planes[...] = yuv444
        return True

    # Luma is copied for cosited and non-cosited positions alike
    image_out.planes[0] = yuv444[0]
    for plane, sub in zip((1, 2), chroma):
        h, w = sub.shape
        image_out.planes[plane, :h, :w] = sub
    return True


def _yuv_image_to_rgb(image_in: Image, image_out: Image) -> bool:
    shape = (image_in.height, image_in.width)
    try:
        yuv = np.stack([
            image_in.planes[0],
            upsample_chroma(image_in.planes[1], image_in.color_space, shape),
            upsample_chroma(image_in.planes[2], image_in.color_space, shape),
        ])
        rgb = yuv_to_rgb(yuv)
    except MemoryError:
        logger.error("convert_image(): could not allocate YUV 4:4:4 working buffer")
        return False

    image_out.planes[...] = rgb
    return True


def convert_image(image_in: Image, image_out: Image) -> bool:
    """Convert image_in into the color space already set on image_out."""
    if image_in.width != image_out.width or image_in.height != image_out.height:
        logger.error("convert_image(): images have different dimensions")
        return False
    if image_in.precision != 'fixed8' or image_out.precision != 'fixed8':
        logger.error("convert_image(): only 8-bit precision supported")
        return False

    src, dst = image_in.color_space, image_out.color_space
    if src == 'RGB' and dst in YUV_SPACES:
        return _rgb_image_to_yuv(image_in, image_out)
    if src in YUV_SPACES and dst == 'RGB':
        return _yuv_image_to_rgb(image_in, image_out)
    if src == dst:
        return copy_image(image_in, image_out)

    logger.error(f"convert_image(): unsupported conversion {src} -> {dst}")
    return False
