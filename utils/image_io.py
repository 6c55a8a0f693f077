"""Image I/O: BMP through OpenCV, raw YUV 4:2:0 through numpy."""

import logging

import cv2
import numpy as np

from engines.color_space import convert_image, upsample_chroma
from models.image import Image, ColorSpace, create_image
from models.resize_params import YUVType
from utils.file_info import yuv420_frame_size

logger = logging.getLogger(__name__)

# Plane written first / second in the chroma section of each raw layout
_CHROMA_ORDER = {
    'I420': (1, 2),
    'YV12': (2, 1),
    'NV12': (1, 2),
    'NV21': (2, 1),
}
_SEMI_PLANAR = ('NV12', 'NV21')


def load_image(path: str) -> np.ndarray:
    """Load image as RGB uint8."""
    img = cv2.imread(path, cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError(f"Could not load image from {path}")
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


def save_image(image: np.ndarray, path: str) -> None:
    """Save RGB image."""
    if not cv2.imwrite(path, cv2.cvtColor(image, cv2.COLOR_RGB2BGR)):
        raise ValueError(f"Could not write image to {path}")


def array_to_image(rgb: np.ndarray, color_space: ColorSpace = 'RGB') -> Image:
    """Wrap an HxWx3 RGB uint8 array as an 8-bit Image in the given color space."""
    h, w = rgb.shape[:2]
    image = create_image('RGB', w, h)
    image.planes[...] = np.transpose(rgb, (2, 0, 1))
    if color_space == 'RGB':
        return image

    converted = create_image(color_space, w, h)
    if not convert_image(image, converted):
        raise ValueError(f"Unable to convert image to {color_space}")
    return converted


def image_to_array(image: Image) -> np.ndarray:
    """HxWx3 RGB uint8 array of an 8-bit Image."""
    if image.color_space != 'RGB':
        rgb = create_image('RGB', image.width, image.height)
        if not convert_image(image, rgb):
            raise ValueError(f"Unable to convert {image.color_space} image to RGB")
        image = rgb
    return np.ascontiguousarray(np.transpose(image.planes, (1, 2, 0)))


def load_bmp(path: str, color_space: ColorSpace = 'RGB') -> Image:
    """Load a 24-bit BMP, converting to color_space when it is not RGB."""
    img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise ValueError(f"Could not load image from {path}")
    if img.dtype != np.uint8 or img.ndim != 3 or img.shape[2] != 3:
        raise ValueError(f"{path} is not a 24-bit image; only 24-bit BMP images are supported")
    return array_to_image(cv2.cvtColor(img, cv2.COLOR_BGR2RGB), color_space)


def save_bmp(path: str, image: Image) -> None:
    """Save an 8-bit Image as BMP, converting to RGB first if needed."""
    save_image(image_to_array(image), path)


def _chroma_grid(width: int, height: int):
    # Chroma is stored at every even luma coordinate
    return (width + 1) // 2, (height + 1) // 2


def load_raw_yuv(
    path: str,
    width: int,
    height: int,
    sub_frame: int = 0,
    yuv_type: YUVType = 'I420',
    color_space: ColorSpace = 'YUV420'
) -> Image:
    """
    Read one frame of a headerless 4:2:0 file.

    Frames are stored back to back: the Y plane, then chroma as two planes
    (I420 U then V, YV12 V then U) or interleaved (NV12 UV, NV21 VU).
    Only YUV420 or RGB targets are supported; 4:2:2 and 4:4:4 raw input is
    rejected.
    """
    if color_space not in ('YUV420', 'RGB'):
        raise ValueError(f"Raw YUV loading into {color_space} is not supported")
    if yuv_type not in _CHROMA_ORDER:
        raise ValueError(f"Invalid YUV format type: {yuv_type}")

    frame_size = yuv420_frame_size(width, height)
    with open(path, 'rb') as f:
        f.seek(frame_size * sub_frame)
        data = np.fromfile(f, dtype=np.uint8, count=frame_size)
    if data.size < frame_size:
        raise ValueError(f"Could not read frame {sub_frame} of {path}: file truncated")

    image = create_image('YUV420', width, height)
    image.planes[0] = data[:width * height].reshape(height, width)

    cw, ch = _chroma_grid(width, height)
    chroma = data[width * height:]
    first, second = _CHROMA_ORDER[yuv_type]
    if yuv_type in _SEMI_PLANAR:
        pairs = chroma.reshape(ch, cw, 2)
        image.planes[first, :ch, :cw] = pairs[:, :, 0]
        image.planes[second, :ch, :cw] = pairs[:, :, 1]
    else:
        n = cw * ch
        image.planes[first, :ch, :cw] = chroma[:n].reshape(ch, cw)
        image.planes[second, :ch, :cw] = chroma[n:].reshape(ch, cw)

    if color_space == 'RGB':
        rgb = create_image('RGB', width, height)
        if not convert_image(image, rgb):
            raise ValueError(f"Unable to convert {path} to RGB")
        return rgb
    return image


def save_raw_yuv(path: str, image: Image, yuv_type: YUVType = 'I420', append: bool = True) -> None:
    """Write an 8-bit Image as one raw 4:2:0 frame, appending by default."""
    if yuv_type not in _CHROMA_ORDER:
        raise ValueError(f"Invalid YUV format type: {yuv_type}")

    if image.color_space == 'RGB':
        yuv = create_image('YUV420', image.width, image.height)
        if not convert_image(image, yuv):
            raise ValueError("Unable to convert RGB image to YUV420")
        image = yuv

    # Chroma is sampled at even luma coordinates through the image's own addressing
    shape = (image.height, image.width)
    grids = {
        plane: upsample_chroma(image.planes[plane], image.color_space, shape)[::2, ::2]
        for plane in (1, 2)
    }
    first, second = _CHROMA_ORDER[yuv_type]
    if yuv_type in _SEMI_PLANAR:
        chroma = np.stack([grids[first], grids[second]], axis=-1)
    else:
        chroma = np.concatenate([grids[first].ravel(), grids[second].ravel()])

    with open(path, 'ab' if append else 'wb') as f:
        f.write(np.ascontiguousarray(image.planes[0]).tobytes())
        f.write(np.ascontiguousarray(chroma).tobytes())
    logger.debug(f"Wrote {image.width}x{image.height} {yuv_type} frame to {path}")
