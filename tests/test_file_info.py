"""Tests for file type detection and frame sequences."""

import os

import pytest

from utils.file_info import (
    ImageFileInfo, detect_file_type, detect_frames, frame_filename, get_file_info, read_image_size,
    yuv420_frame_size,
)
from utils.image_io import array_to_image, save_bmp
from utils.test_images import generate_solid


def test_detect_file_type():
    assert detect_file_type('clip.yuv') == 'yuv'
    assert detect_file_type('PHOTO.BMP') == 'bmp'
    assert detect_file_type('photo.png') == 'unsupported'
    assert detect_file_type('noextension') is None


def test_frame_filename_is_zero_padded():
    assert frame_filename('out/clip', 7, 'bmp') == 'out/clip00007.bmp'


def test_frame_size_rounds_chroma_up():
    assert yuv420_frame_size(4, 2) == 12
    assert yuv420_frame_size(3, 3) == 17


def test_numbered_bmp_sequence(tmp_path):
    for n in (3, 4, 5):
        (tmp_path / f'clip{n:05d}.bmp').write_bytes(b'')

    info = ImageFileInfo(str(tmp_path / 'clip00003.bmp'), file_type='bmp')
    detect_frames(info)

    assert info.start_frame == 3
    assert info.num_frames == 3
    assert info.num_sub_frames == 1
    assert info.is_multiframe
    assert info.frame_path(1) == str(tmp_path / 'clip00004.bmp')


def test_single_numbered_file_is_a_still(tmp_path):
    path = tmp_path / 'shot42.bmp'
    path.write_bytes(b'')
    info = ImageFileInfo(str(path), file_type='bmp')
    detect_frames(info)

    assert info.num_frames == 1
    assert info.start_frame == 0
    assert not info.is_multiframe
    assert info.frame_path(0) == str(path)


def test_missing_first_frame(tmp_path):
    info = ImageFileInfo(str(tmp_path / 'gone00001.bmp'), file_type='bmp')
    with pytest.raises(ValueError):
        detect_frames(info)


def test_yuv_sub_frames_counted_from_size(tmp_path):
    path = tmp_path / 'clip.yuv'
    path.write_bytes(bytes(3 * yuv420_frame_size(4, 4)))
    info = ImageFileInfo(str(path), file_type='yuv', width=4, height=4)
    detect_frames(info)

    assert info.num_frames == 1
    assert info.num_sub_frames == 3
    assert info.is_multiframe


def test_yuv_size_must_be_whole_frames(tmp_path):
    path = tmp_path / 'clip.yuv'
    path.write_bytes(bytes(yuv420_frame_size(4, 4) + 1))
    with pytest.raises(ValueError):
        detect_frames(ImageFileInfo(str(path), file_type='yuv', width=4, height=4))
    with pytest.raises(ValueError):
        detect_frames(ImageFileInfo(str(path), file_type='yuv'))


def test_get_file_info_reads_bmp_dimensions(tmp_path):
    path = str(tmp_path / 'in.bmp')
    save_bmp(path, array_to_image(generate_solid(6, 4)))

    in_info = ImageFileInfo(path)
    out_info = ImageFileInfo(str(tmp_path / 'out.yuv'))
    get_file_info(in_info, out_info)

    assert (in_info.file_type, in_info.width, in_info.height) == ('bmp', 6, 4)
    assert out_info.file_type == 'yuv'
    assert out_info.num_frames == 1


def test_get_file_info_sniffs_extensionless_input(tmp_path):
    bmp = str(tmp_path / 'in.bmp')
    save_bmp(bmp, array_to_image(generate_solid(2, 2)))
    plain = str(tmp_path / 'picture')
    os.rename(bmp, plain)

    in_info = ImageFileInfo(plain)
    out_info = ImageFileInfo(str(tmp_path / 'result'))
    get_file_info(in_info, out_info)
    assert in_info.file_type == 'bmp'
    # Output without extension follows the input type
    assert out_info.file_type == 'bmp'


def test_get_file_info_rejects_bad_names(tmp_path):
    with pytest.raises(ValueError):
        get_file_info(ImageFileInfo(str(tmp_path / 'missing.bmp')), ImageFileInfo('out.bmp'))

    src = tmp_path / 'in.png'
    src.write_bytes(b'')
    with pytest.raises(ValueError):
        get_file_info(ImageFileInfo(str(src)), ImageFileInfo('out.bmp'))

    yuv = tmp_path / 'in.yuv'
    yuv.write_bytes(bytes(yuv420_frame_size(2, 2)))
    with pytest.raises(ValueError):
        get_file_info(ImageFileInfo(str(yuv), width=2, height=2), ImageFileInfo('out.jpg'))


def test_get_file_info_treats_unknown_bytes_as_yuv(tmp_path):
    raw = tmp_path / 'capture'
    raw.write_bytes(bytes(2 * yuv420_frame_size(4, 2)))

    in_info = ImageFileInfo(str(raw), width=4, height=2)
    get_file_info(in_info, ImageFileInfo(str(tmp_path / 'out.bmp')))
    assert in_info.file_type == 'yuv'
    assert in_info.num_sub_frames == 2


def test_read_image_size(tmp_path):
    path = str(tmp_path / 'in.bmp')
    save_bmp(path, array_to_image(generate_solid(7, 3)))
    assert read_image_size(path) == (7, 3)
    assert read_image_size(str(tmp_path / 'missing.bmp')) is None
