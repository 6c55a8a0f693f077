"""Metrics: PSNR, SSIM, stage timing."""

import time
from typing import Dict

import numpy as np
from skimage.metrics import peak_signal_noise_ratio, structural_similarity


def compute_psnr_ssim(reference_rgb: np.ndarray, test_rgb: np.ndarray) -> Dict[str, float]:
    """Compute PSNR and SSIM on RGB and Y channel of two HxWx3 uint8 images."""
    if reference_rgb.shape != test_rgb.shape:
        raise ValueError(f"Image shapes differ: {reference_rgb.shape} vs {test_rgb.shape}")

    psnr_rgb = peak_signal_noise_ratio(reference_rgb, test_rgb, data_range=255)
    # SSIM needs a 7x7 window; tiny images fall back to the largest odd size that fits
    win_size = min(7, *reference_rgb.shape[:2])
    win_size -= (win_size + 1) % 2
    if win_size < 3:
        raise ValueError(f"Image too small for SSIM: {reference_rgb.shape[:2]}")
    ssim_rgb = structural_similarity(
        reference_rgb, test_rgb, channel_axis=2, data_range=255, win_size=win_size
    )

    # Y channel (luminance) - BT.601
    ref = reference_rgb.astype(np.float64)
    test = test_rgb.astype(np.float64)
    reference_y = 0.299 * ref[:, :, 0] + 0.587 * ref[:, :, 1] + 0.114 * ref[:, :, 2]
    test_y = 0.299 * test[:, :, 0] + 0.587 * test[:, :, 1] + 0.114 * test[:, :, 2]

    psnr_y = peak_signal_noise_ratio(reference_y, test_y, data_range=255)
    ssim_y = structural_similarity(reference_y, test_y, data_range=255, win_size=win_size)

    return {
        'psnr_rgb': float(psnr_rgb),
        'ssim_rgb': float(ssim_rgb),
        'psnr_y': float(psnr_y),
        'ssim_y': float(ssim_y)
    }


class Timer:
    """Simple timer for named pipeline stages."""

    def __init__(self):
        self.times_ms: Dict[str, float] = {}

    def measure(self, stage: str, func, *args, **kwargs):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        self.times_ms[stage] = (time.perf_counter() - start) * 1000.0
        return result

    @property
    def total_ms(self) -> float:
        return sum(self.times_ms.values())
