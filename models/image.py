"""Three-plane image container with color-space-aware addressing."""

import logging
from dataclasses import dataclass
from typing import Literal, Tuple

import numpy as np

from models.edge import EdgeMethod, resolve_edge

logger = logging.getLogger(__name__)

ColorSpace = Literal['RGB', 'YUV444', 'YUV422', 'YUV420']
Precision = Literal['fixed8', 'double']

COLOR_SPACES = ('RGB', 'YUV444', 'YUV422', 'YUV420')
PRECISIONS = ('fixed8', 'double')

# (subX, subY) divisors for planes 1 and 2
SUBSAMPLING = {
    'RGB': (1, 1),
    'YUV444': (1, 1),
    'YUV422': (2, 1),
    'YUV420': (2, 2),
}

Y_PLANE, U_PLANE, V_PLANE = 0, 1, 2
R_PLANE, G_PLANE, B_PLANE = 0, 1, 2

PIXMAX = 255


@dataclass
class Image:
    """
    Still image held as one (3, height, width) array.

    Planes 1 and 2 are allocated at full size but only their top-left
    ceil(width/subX) x ceil(height/subY) region is meaningful for
    subsampled YUV, the grid that coordinate division reaches.
    The sample type (uint8 or float64) follows `precision` and never changes.
    """

    color_space: ColorSpace
    width: int
    height: int
    precision: Precision
    planes: np.ndarray

    def __post_init__(self):
        if self.color_space not in COLOR_SPACES:
            raise ValueError(f"Unknown color space: {self.color_space}")
        if self.precision not in PRECISIONS:
            raise ValueError(f"Unsupported pixel precision: {self.precision}")
        expected = (3, self.height, self.width)
        if self.planes.shape != expected:
            raise ValueError(f"Plane buffer shape {self.planes.shape} != {expected}")
        if self.planes.dtype != sample_dtype(self.precision):
            raise ValueError(f"Plane dtype {self.planes.dtype} does not match {self.precision}")

    @property
    def subsampling(self) -> Tuple[int, int]:
        return SUBSAMPLING[self.color_space]

    @property
    def chroma_size(self) -> Tuple[int, int]:
        """Logical (width, height) of planes 1 and 2, rounded up for odd sizes."""
        sub_x, sub_y = self.subsampling
        return -(-self.width // sub_x), -(-self.height // sub_y)

    @property
    def is_yuv(self) -> bool:
        return self.color_space != 'RGB'

    def chroma_address(self, y: int, x: int) -> Tuple[int, int]:
        """Divide luma-frame coordinates down to the plane 1/2 grid."""
        sub_x, sub_y = self.subsampling
        return y // sub_y, x // sub_x

    def in_bounds(self, y: int, x: int) -> bool:
        return 0 <= y < self.height and 0 <= x < self.width

    def get_pixel(self, y: int, x: int, edge_method: EdgeMethod = 'repeat') -> np.ndarray:
        """Read all three samples at luma coordinates (y, x)."""
        y = resolve_edge(y, self.height, edge_method)
        x = resolve_edge(x, self.width, edge_method)
        cy, cx = self.chroma_address(y, x)
        return np.array([
            self.planes[0, y, x],
            self.planes[1, cy, cx],
            self.planes[2, cy, cx],
        ], dtype=self.planes.dtype)

    def set_pixel(self, y: int, x: int, pixel) -> None:
        """Write all three samples; out-of-bounds targets are ignored."""
        if not self.in_bounds(y, x):
            return
        self.planes[0, y, x] = pixel[0]
        cy, cx = self.chroma_address(y, x)
        self.planes[1, cy, cx] = pixel[1]
        self.planes[2, cy, cx] = pixel[2]

    def get_subpixel(self, y: int, x: int, plane: int, edge_method: EdgeMethod = 'repeat'):
        """Read one sample (R, G, B, Y, U or V) at luma coordinates."""
        y = resolve_edge(y, self.height, edge_method)
        x = resolve_edge(x, self.width, edge_method)
        if plane in (U_PLANE, V_PLANE):
            y, x = self.chroma_address(y, x)
        return self.planes[plane, y, x]

    def set_subpixel(self, y: int, x: int, plane: int, value) -> None:
        """Write one sample; out-of-bounds targets are ignored."""
        if not self.in_bounds(y, x):
            return
        if plane in (U_PLANE, V_PLANE):
            y, x = self.chroma_address(y, x)
        self.planes[plane, y, x] = value

    def plane_view(self, plane: int) -> np.ndarray:
        """Logical region of a plane (chroma planes are cropped to their grid)."""
        if plane == 0:
            return self.planes[0]
        w, h = self.chroma_size
        return self.planes[plane, :h, :w]


def sample_dtype(precision: Precision):
    return np.uint8 if precision == 'fixed8' else np.float64


def create_image(
    color_space: ColorSpace,
    width: int,
    height: int,
    precision: Precision = 'fixed8'
) -> Image:
    """Allocate a zero-filled image. MemoryError is left to the caller."""
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if precision not in PRECISIONS:
        raise ValueError(f"Unsupported pixel precision: {precision}")
    planes = np.zeros((3, height, width), dtype=sample_dtype(precision))
    return Image(color_space, width, height, precision, planes)


def copy_image(image_in: Image, image_out: Image) -> bool:
    """Copy samples and color space; precision and dimensions must match."""
    if image_in.width != image_out.width or image_in.height != image_out.height:
        logger.error("copy_image(): images have different dimensions")
        return False
    if image_in.precision != image_out.precision:
        logger.error("copy_image(): image precisions differ")
        return False

    image_out.planes[...] = image_in.planes
    image_out.color_space = image_in.color_space
    return True
