"""Tests for BMP and raw YUV 4:2:0 file I/O."""

import cv2
import numpy as np
import pytest

from models.image import create_image
from models.resize_params import YUV_TYPES
from utils.file_info import read_image_size
from utils.image_io import array_to_image, load_bmp, load_raw_yuv, save_bmp, save_raw_yuv
from utils.metrics import compute_psnr_ssim
from utils.test_images import generate_chroma_stripes


def _yuv420_frame():
    image = create_image('YUV420', 4, 2)
    image.planes[0] = np.arange(1, 9, dtype=np.uint8).reshape(2, 4)
    image.planes[1, 0, :2] = [10, 11]
    image.planes[2, 0, :2] = [20, 21]
    return image


@pytest.mark.parametrize("yuv_type,chroma_bytes", [
    ('I420', [10, 11, 20, 21]),
    ('YV12', [20, 21, 10, 11]),
    ('NV12', [10, 20, 11, 21]),
    ('NV21', [20, 10, 21, 11]),
])
def test_raw_layouts(tmp_path, yuv_type, chroma_bytes):
    path = tmp_path / 'frame.yuv'
    save_raw_yuv(str(path), _yuv420_frame(), yuv_type, append=False)

    data = list(path.read_bytes())
    assert data == list(range(1, 9)) + chroma_bytes


@pytest.mark.parametrize("yuv_type", YUV_TYPES)
def test_raw_round_trip(tmp_path, rng, yuv_type):
    image = create_image('YUV420', 6, 4)
    image.planes[0] = rng.integers(0, 256, (4, 6), dtype=np.uint8)
    image.planes[1:, :2, :3] = rng.integers(0, 256, (2, 2, 3), dtype=np.uint8)

    path = str(tmp_path / 'clip.yuv')
    save_raw_yuv(path, image, yuv_type, append=False)
    loaded = load_raw_yuv(path, 6, 4, yuv_type=yuv_type)

    assert loaded.color_space == 'YUV420'
    for plane in range(3):
        assert np.array_equal(loaded.plane_view(plane), image.plane_view(plane))


def test_odd_size_frame(tmp_path):
    image = create_image('YUV420', 3, 3)
    image.planes[...] = 50
    path = tmp_path / 'odd.yuv'
    save_raw_yuv(str(path), image, append=False)
    # 9 luma bytes plus two 2x2 chroma grids
    assert path.stat().st_size == 9 + 2 * 4
    loaded = load_raw_yuv(str(path), 3, 3)
    assert loaded.planes[0].tolist() == [[50] * 3] * 3


def test_append_and_select_sub_frame(tmp_path):
    path = str(tmp_path / 'seq.yuv')
    first = _yuv420_frame()
    second = _yuv420_frame()
    second.planes[0] = 200

    save_raw_yuv(path, first, append=False)
    save_raw_yuv(path, second)

    assert np.array_equal(load_raw_yuv(path, 4, 2, sub_frame=1).planes[0], second.planes[0])
    assert np.array_equal(load_raw_yuv(path, 4, 2, sub_frame=0).planes[0], first.planes[0])
    with pytest.raises(ValueError):
        load_raw_yuv(path, 4, 2, sub_frame=2)


def test_rgb_image_saved_as_yuv(tmp_path):
    image = array_to_image(np.full((2, 2, 3), 255, dtype=np.uint8))
    path = tmp_path / 'white.yuv'
    save_raw_yuv(str(path), image, append=False)
    assert list(path.read_bytes()) == [235] * 4 + [128, 128]


def test_raw_load_into_rgb(tmp_path):
    path = str(tmp_path / 'gray.yuv')
    gray = create_image('YUV420', 2, 2)
    gray.planes[0] = 126
    gray.planes[1:] = 128
    save_raw_yuv(path, gray, append=False)

    rgb = load_raw_yuv(path, 2, 2, color_space='RGB')
    assert rgb.color_space == 'RGB'
    assert np.abs(rgb.planes.astype(int) - 128).max() <= 1


def test_raw_load_rejects_422(tmp_path):
    path = str(tmp_path / 'frame.yuv')
    save_raw_yuv(path, _yuv420_frame(), append=False)
    with pytest.raises(ValueError):
        load_raw_yuv(path, 4, 2, color_space='YUV422')


def test_bmp_round_trip(tmp_path):
    rgb = generate_chroma_stripes(16, 6)
    path = str(tmp_path / 'stripes.bmp')
    save_bmp(path, array_to_image(rgb))

    assert read_image_size(path) == (16, 6)

    loaded = load_bmp(path)
    assert np.array_equal(np.transpose(loaded.planes, (1, 2, 0)), rgb)


def test_bmp_load_into_yuv(tmp_path):
    path = str(tmp_path / 'stripes.bmp')
    save_bmp(path, array_to_image(generate_chroma_stripes(16, 6)))
    assert load_bmp(path, 'YUV420').color_space == 'YUV420'


def test_non_bmp_rejected(tmp_path):
    path = tmp_path / 'fake.bmp'
    path.write_bytes(b'not a bitmap at all, just some bytes')
    assert read_image_size(str(path)) is None
    with pytest.raises(ValueError):
        load_bmp(str(path))


def test_metrics_identical_images():
    rgb = generate_chroma_stripes(16, 16)
    metrics = compute_psnr_ssim(rgb, rgb)
    assert metrics['psnr_y'] == float('inf')
    assert metrics['ssim_rgb'] == pytest.approx(1.0)


def test_metrics_shape_mismatch():
    with pytest.raises(ValueError):
        compute_psnr_ssim(generate_chroma_stripes(8, 8), generate_chroma_stripes(16, 8))


def test_bmp_without_three_channels_rejected(tmp_path):
    path = str(tmp_path / 'gray.bmp')
    cv2.imwrite(path, np.full((4, 4), 90, dtype=np.uint8))
    with pytest.raises(ValueError):
        load_bmp(path)
