"""Lanczos-2 kernel and contribution table construction."""

import math

from models.contribution_table import ContributionTable
from models.edge import EdgeMethod, resolve_edge

EPSILON = 0.0000125
LANCZOS2_NUMTAPS = 2.0


def sinc(x: float) -> float:
    """Normalized sinc, sin(pi x) / (pi x)."""
    x *= math.pi
    if -EPSILON < x < EPSILON:
        # Taylor expansion near the removable singularity
        return 1.0 + x * x * (-1.0 / 6.0 + x * x / 120.0)
    return math.sin(x) / x


def lanczos2(t: float) -> float:
    """Filter weight at offset t; tiny weights snap to exactly zero."""
    t = abs(t)
    if t < LANCZOS2_NUMTAPS:
        weight = sinc(t) * sinc(t / LANCZOS2_NUMTAPS)
        return 0.0 if abs(weight) < EPSILON else weight
    return 0.0


def filter_support(in_size: int, out_size: int):
    """Return (scale_ratio, filter_scale, half_taps) for one axis."""
    scale_ratio = out_size / in_size
    if scale_ratio >= 1.0:
        return scale_ratio, 1.0, LANCZOS2_NUMTAPS
    # Downscaling stretches the kernel to keep it a low-pass at the output rate
    return scale_ratio, scale_ratio, LANCZOS2_NUMTAPS / scale_ratio


def make_contribution_table(
    in_size: int,
    out_size: int,
    edge_method: EdgeMethod = 'repeat'
) -> ContributionTable:
    """
    Precompute contributing source pixels and weights for every output pixel.

    Weights are not normalized here. Filtering divides by the stored sum,
    which keeps kernels truncated at the image edge (nocontrib) averaging
    correctly over the taps that remain.
    """
    if in_size < 1 or out_size < 1:
        raise ValueError(f"Axis sizes must be positive, got {in_size} -> {out_size}")

    scale_ratio, filter_scale, half_taps = filter_support(in_size, out_size)

    rows = []
    sums = []
    for i in range(out_size):
        center = (i + 0.5) / scale_ratio - 0.5
        left = math.floor(center - half_taps)
        right = math.ceil(center + half_taps)

        row = []
        weights_sum = 0.0
        for j in range(left, right + 1):
            if edge_method == 'nocontrib' and (j < 0 or j > in_size):
                continue

            weight = lanczos2((center - j) * filter_scale)
            if weight == 0:
                continue

            row.append((resolve_edge(j, in_size, edge_method), weight))
            weights_sum += weight

        rows.append(row)
        sums.append(weights_sum)

    return ContributionTable.from_rows(in_size, rows, sums)
