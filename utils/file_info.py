"""File type detection and frame sequence enumeration."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Tuple

import cv2

from models.resize_params import YUVType

logger = logging.getLogger(__name__)

FileType = Literal['yuv', 'bmp', 'unsupported']

# CLI codes for raw 4:2:0 chroma orderings
YUV_TYPE_CODES = {0: 'I420', 1: 'YV12', 2: 'NV12', 3: 'NV21'}


@dataclass
class ImageFileInfo:
    """Where a still or a sequence of frames lives on disk."""

    filename: str
    file_type: FileType = 'unsupported'
    yuv_type: YUVType = 'I420'
    width: int = 0
    height: int = 0
    num_frames: int = 0
    num_sub_frames: int = 1
    start_frame: int = 0
    base_name: str = ''

    @property
    def extension(self) -> str:
        suffix = Path(self.filename).suffix.lstrip('.')
        return suffix or self.file_type

    @property
    def is_multiframe(self) -> bool:
        return self.num_frames > 1 or self.num_sub_frames > 1

    def frame_path(self, index: int) -> str:
        """Path of the index-th file of the sequence (the file itself for a single file)."""
        if self.num_frames > 1:
            return frame_filename(self.base_name, self.start_frame + index, self.extension)
        return self.filename


def frame_filename(base_name: str, frame: int, extension: str) -> str:
    return f"{base_name}{frame:05d}.{extension}"


def yuv420_frame_size(width: int, height: int) -> int:
    """Bytes in one raw 4:2:0 frame (chroma grid rounds odd sizes up)."""
    chroma = ((width + 1) // 2) * ((height + 1) // 2)
    return width * height + 2 * chroma


def detect_file_type(filename: str) -> Optional[FileType]:
    """File type from extension, or None when the name has no extension."""
    suffix = Path(filename).suffix.lower()
    if not suffix:
        return None
    if suffix.startswith('.yuv'):
        return 'yuv'
    if suffix.startswith('.bmp'):
        return 'bmp'
    return 'unsupported'


def read_image_size(filename: str) -> Optional[Tuple[int, int]]:
    """(width, height) of an image OpenCV can decode, or None."""
    img = cv2.imread(filename, cv2.IMREAD_UNCHANGED)
    if img is None:
        return None
    return img.shape[1], img.shape[0]


def detect_frames(info: ImageFileInfo) -> None:
    """
    Fill in start frame, frame count, sub-frame count and base name.

    A name like clip00012.bmp starts a sequence clip00012.bmp, clip00013.bmp,
    ... that runs while the next file exists. A single raw YUV file may hold
    several frames back to back; they are counted from its size.
    """
    if not os.path.isfile(info.filename):
        raise ValueError(f"File {info.filename} cannot be found")

    path = Path(info.filename)
    stem = path.stem
    digits = len(stem) - len(stem.rstrip('0123456789'))
    info.num_frames = 1
    info.num_sub_frames = 1

    if digits:
        info.base_name = os.path.join(str(path.parent), stem[:-digits])
        info.start_frame = int(stem[-digits:])
        # Only names following the zero-padded frame convention start a sequence
        if os.path.exists(frame_filename(info.base_name, info.start_frame, info.extension)):
            info.num_frames = 0
            while os.path.exists(frame_filename(info.base_name, info.start_frame + info.num_frames,
                                                info.extension)):
                info.num_frames += 1

    if info.num_frames == 1:
        info.start_frame = 0
        info.base_name = str(path.with_suffix(''))

    if info.file_type == 'yuv':
        if info.width == 0 or info.height == 0:
            raise ValueError("Height and width must be specified for YUV input")
        size = os.path.getsize(info.frame_path(0))
        frame_size = yuv420_frame_size(info.width, info.height)
        if size == 0 or size % frame_size != 0:
            raise ValueError(
                f"YUV file {info.frame_path(0)} size {size} is not a multiple of "
                f"the {info.width}x{info.height} frame size {frame_size}"
            )
        info.num_sub_frames = size // frame_size


def get_file_info(in_info: ImageFileInfo, out_info: ImageFileInfo) -> None:
    """Resolve types, input dimensions and frame counts for an input/output pair."""
    if not os.path.isfile(in_info.filename):
        raise ValueError(f"Input file {in_info.filename} cannot be opened")

    file_type = detect_file_type(in_info.filename)
    if file_type is None:
        # No extension: anything OpenCV recognizes is a bitmap, the rest is raw YUV
        file_type = 'bmp' if cv2.haveImageReader(in_info.filename) else 'yuv'
    if file_type == 'unsupported':
        raise ValueError(f"Unsupported file type for input file {in_info.filename}")
    in_info.file_type = file_type

    out_type = detect_file_type(out_info.filename)
    if out_type == 'unsupported':
        raise ValueError(f"Unsupported file type for output file {out_info.filename}")
    # Without an extension, keep the input type to avoid a color space conversion
    out_info.file_type = out_type or in_info.file_type

    if in_info.file_type == 'bmp':
        size = read_image_size(in_info.filename)
        if size is None:
            raise ValueError(f"Cannot determine BMP dimensions of {in_info.filename}")
        in_info.width, in_info.height = size

    detect_frames(in_info)

    out_info.num_frames = in_info.num_frames
    out_info.num_sub_frames = in_info.num_sub_frames
    out_info.start_frame = in_info.start_frame
    out_info.base_name = str(Path(out_info.filename).with_suffix(''))
    logger.info(
        f"{in_info.filename}: {in_info.file_type} {in_info.width}x{in_info.height}, "
        f"{in_info.num_frames} frame(s) x {in_info.num_sub_frames} sub-frame(s)"
    )
