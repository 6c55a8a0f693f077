"""Precomputed per-output-coordinate filter taps for one resize axis."""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np


@dataclass(frozen=True)
class ContributionTable:
    """
    Source indices and kernel weights for every output coordinate.

    Rows are padded to the widest row; padded slots point at source 0 with
    weight 0. `weights_sum` is the running sum of the real weights and is
    what filtering divides by, so tables are never normalized up front.
    """

    in_size: int
    out_size: int
    indices: np.ndarray
    weights: np.ndarray
    counts: np.ndarray
    weights_sum: np.ndarray

    def __post_init__(self):
        for arr in (self.indices, self.weights, self.counts, self.weights_sum):
            arr.setflags(write=False)

    @property
    def max_taps(self) -> int:
        return self.indices.shape[1]

    def contributors(self, i: int) -> List[Tuple[int, float]]:
        """Ordered (source_index, weight) pairs for output coordinate i."""
        n = int(self.counts[i])
        return [
            (int(self.indices[i, k]), float(self.weights[i, k]))
            for k in range(n)
        ]

    @classmethod
    def from_rows(
        cls,
        in_size: int,
        rows: List[List[Tuple[int, float]]],
        sums: List[float]
    ) -> 'ContributionTable':
        """Pack ragged contributor lists into padded arrays."""
        out_size = len(rows)
        max_taps = max((len(r) for r in rows), default=0)
        max_taps = max(max_taps, 1)

        indices = np.zeros((out_size, max_taps), dtype=np.int64)
        weights = np.zeros((out_size, max_taps), dtype=np.float64)
        counts = np.zeros(out_size, dtype=np.int64)
        for i, row in enumerate(rows):
            counts[i] = len(row)
            for k, (src, w) in enumerate(row):
                indices[i, k] = src
                weights[i, k] = w

        return cls(
            in_size=in_size,
            out_size=out_size,
            indices=indices,
            weights=weights,
            counts=counts,
            weights_sum=np.array(sums, dtype=np.float64),
        )
