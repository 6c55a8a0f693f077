"""Resize run parameters."""

from dataclasses import dataclass
from typing import Literal, Tuple

from models.edge import EdgeMethod, EDGE_METHODS

# Raw 4:2:0 chroma orderings
YUVType = Literal['I420', 'YV12', 'NV12', 'NV21']
YUV_TYPES = ('I420', 'YV12', 'NV12', 'NV21')

MIN_DIMENSION = 1
MAX_DIMENSION = 4096

DEFAULT_GAMMA = 2.2


@dataclass
class ResizeParams:
    """Lanczos-2 resize parameters for one run."""

    scale_ratio: float = 2.0
    gamma: float = DEFAULT_GAMMA
    edge_method: EdgeMethod = 'repeat'
    yuv_type: YUVType = 'I420'
    width: int = 0
    height: int = 0

    def __post_init__(self):
        if self.scale_ratio <= 0:
            raise ValueError(f"Scale ratio must be positive, got {self.scale_ratio}")
        if self.gamma <= 0:
            raise ValueError(f"Gamma must be positive, got {self.gamma}")
        if self.edge_method not in EDGE_METHODS:
            raise ValueError(f"Edge method must be one of {EDGE_METHODS}, got {self.edge_method}")
        if self.yuv_type not in YUV_TYPES:
            raise ValueError(f"YUV type must be one of {YUV_TYPES}, got {self.yuv_type}")
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Width and height cannot be negative, got {self.width}x{self.height}")

    def output_size(self, width: int, height: int) -> Tuple[int, int]:
        """Scaled (width, height), rounded to nearest and checked against limits."""
        out_w = int(width * self.scale_ratio + 0.5)
        out_h = int(height * self.scale_ratio + 0.5)
        for dim in (out_w, out_h):
            if not (MIN_DIMENSION <= dim <= MAX_DIMENSION):
                raise ValueError(
                    f"Output size {out_w}x{out_h} outside {MIN_DIMENSION}..{MAX_DIMENSION}"
                )
        return out_w, out_h
