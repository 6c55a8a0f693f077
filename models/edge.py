"""Edge policies: map out-of-range coordinates back into an image axis."""

from typing import Literal

import numpy as np

# repeat:    replicate the edge sample
# mirror:    reflect about the edge sample
# nocontrib: drop out-of-image kernel taps (handled by the table builder)
EdgeMethod = Literal['repeat', 'mirror', 'nocontrib']

EDGE_METHODS = ('repeat', 'mirror', 'nocontrib')


def resolve_edge(i: int, dim: int, edge_method: EdgeMethod = 'repeat') -> int:
    """Adjust a 1-D address for the edge policy, always ending inside [0, dim-1]."""
    if edge_method == 'mirror':
        if i < 0:
            i = -i
        if i >= dim:
            i = dim * 2 - i - 2
    # Mirrored address can still fall outside on very short axes
    return min(max(i, 0), dim - 1)


def resolve_edges(indices: np.ndarray, dim: int, edge_method: EdgeMethod = 'repeat') -> np.ndarray:
    """Vectorized resolve_edge over an integer array."""
    idx = np.asarray(indices, dtype=np.int64)
    if edge_method == 'mirror':
        idx = np.abs(idx)
        idx = np.where(idx >= dim, dim * 2 - idx - 2, idx)
    return np.clip(idx, 0, dim - 1)
